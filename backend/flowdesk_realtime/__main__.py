from flowdesk_realtime.main import run

run()
