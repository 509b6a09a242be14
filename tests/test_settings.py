from app.settings import Settings


def test_s3_style_env_names(monkeypatch):
    monkeypatch.setenv("S3_BUCKET_NAME", "gallery")
    monkeypatch.setenv("S3_BUCKET_LOC", "eu-central-1")
    monkeypatch.setenv("S3_ACCESS_KEY", "key")
    monkeypatch.setenv("S3_SECRET_KEY", "secret")
    monkeypatch.setenv("DYNAMODB_URI", "http://localhost:8000")
    monkeypatch.setenv("PORT", "8080")

    settings = Settings()
    assert settings.s3_bucket == "gallery"
    assert settings.aws_region == "eu-central-1"
    assert settings.aws_access_key_id == "key"
    assert settings.aws_secret_access_key == "secret"
    assert settings.dynamodb_uri == "http://localhost:8000"
    assert settings.port == 8080
    assert settings.missing_env() == []


def test_defaults(monkeypatch):
    for name in ("S3_BUCKET_NAME", "S3_BUCKET", "DYNAMODB_URI", "PORT", "MAX_UPLOAD_BYTES", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()
    assert settings.port == 5000
    assert settings.max_upload_bytes == 10 * 1024 * 1024
    assert settings.key_prefix == "images/"
    assert settings.cors_origins_list == ["http://localhost:5173"]
    assert "DYNAMODB_URI" in settings.missing_env()


def test_cors_origins_list(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    assert Settings().cors_origins_list == ["http://a.test", "http://b.test"]
