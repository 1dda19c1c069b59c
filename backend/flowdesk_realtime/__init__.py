"""FlowDesk realtime fan-out server."""
