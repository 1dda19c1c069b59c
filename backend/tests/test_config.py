from flowdesk_realtime.core.config import Settings


def test_cors_origins_split_and_trimmed():
    s = Settings(CORS_ORIGIN="http://localhost:3000, https://app.example.com ,,")
    assert s.cors_origins == ["http://localhost:3000", "https://app.example.com"]


def test_cors_origins_default_when_blank():
    s = Settings(CORS_ORIGIN=" , ")
    assert s.cors_origins == ["http://localhost:3000"]


def test_defaults():
    fields = Settings.model_fields
    assert fields["PORT"].default == 4001
    assert fields["SOCKETIO_PATH"].default == "socket.io"
    assert fields["REALTIME_TOKEN_AUDIENCE"].default == "flowdesk-realtime"
    assert fields["REALTIME_TOKEN_TTL_SECONDS"].default == 120
    assert fields["EMIT_MAX_BODY_BYTES"].default == 1024 * 1024
