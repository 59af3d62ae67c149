from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic_settings import BaseSettings, SettingsConfigDict

from .backoff_policy import ExponentialBackoffPolicy
from .retry_policy import LimitedTimeRetryPolicy

if TYPE_CHECKING:
    from botocore.client import BaseClient

    from .raw_client import RawClient


@dataclass(frozen=True)
class Credentials:
    """Access key pair used to sign requests.

    Both keys ``None`` means anonymous, unsigned access.
    """

    access_key_id: str | None = None
    secret_access_key: str | None = None
    session_token: str | None = None

    @property
    def anonymous(self) -> bool:
        return self.access_key_id is None and self.secret_access_key is None

    def __repr__(self) -> str:
        return f"Credentials(access_key_id={self.access_key_id!r}, anonymous={self.anonymous})"


def create_insecure_credentials() -> Credentials:
    """Return credentials for anonymous access (no request signing)."""
    return Credentials()


class ClientOptions(BaseSettings):
    """Settings for storage clients.

    You can adapt the following settings in your environment variables (or using and .env file):
    - CLOUDSTORE_ENDPOINT_URL: The URL of the storage service
    - CLOUDSTORE_REGION: The region of the storage service
    - CLOUDSTORE_PROJECT_ID: The default project for bucket listings
    - CLOUDSTORE_ACCESS_KEY_ID: The access key ID (HMAC key) for the client
    - CLOUDSTORE_SECRET_ACCESS_KEY: The secret access key for the client
    - CLOUDSTORE_ENABLE_TRACING: Log every raw request and response

    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CLOUDSTORE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # The endpoint URL of the storage service (S3-compatible interoperability API)
    endpoint_url: str = "https://storage.googleapis.com"

    # The region of the storage service
    region: str = "auto"

    # The default project for bucket listings
    project_id: str = ""

    # The access key ID for the client; leave unset for anonymous access
    access_key_id: str | None = None

    # The secret access key for the client
    secret_access_key: str | None = None

    session_token: str | None = None

    # Wrap the transport with the logging decorator
    enable_tracing: bool = False

    # Retry and backoff configuration, in seconds
    maximum_retry_duration: float = 15 * 60.0
    initial_backoff_delay: float = 0.01
    maximum_backoff_delay: float = 5 * 60.0
    backoff_scaling: float = 2.0

    # Size of each ranged read issued by ObjectReadStream
    download_chunk_size: int = 8 * 1024 * 1024

    @property
    def credentials(self) -> Credentials:
        return Credentials(self.access_key_id, self.secret_access_key, self.session_token)

    def with_credentials(self, credentials: Credentials) -> ClientOptions:
        """Return a copy of these options using *credentials*."""
        return self.model_copy(
            update={
                "access_key_id": credentials.access_key_id,
                "secret_access_key": credentials.secret_access_key,
                "session_token": credentials.session_token,
            }
        )

    def retry_policy(self) -> LimitedTimeRetryPolicy:
        """Create the retry policy prototype described by these options."""
        return LimitedTimeRetryPolicy(self.maximum_retry_duration)

    def backoff_policy(self) -> ExponentialBackoffPolicy:
        """Create the backoff policy prototype described by these options."""
        return ExponentialBackoffPolicy(
            self.initial_backoff_delay,
            self.maximum_backoff_delay,
            self.backoff_scaling,
        )

    def create_s3_client(self) -> BaseClient:
        """Create a boto3 S3 client from the settings."""

        import boto3
        from botocore import UNSIGNED
        from botocore.config import Config

        credentials = self.credentials
        if credentials.anonymous:
            return boto3.client(
                "s3",
                endpoint_url=self.endpoint_url,
                region_name=self.region,
                config=Config(signature_version=UNSIGNED, retries={"total_max_attempts": 1}),
            )
        return boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            region_name=self.region,
            aws_access_key_id=credentials.access_key_id,
            aws_secret_access_key=credentials.secret_access_key,
            aws_session_token=credentials.session_token,
            config=Config(retries={"total_max_attempts": 1}),
        )

    def create_raw_client(self) -> RawClient:
        """Create the transport, wrapped for logging when tracing is enabled."""

        from .logging_client import LoggingClient
        from .transport import Boto3RawClient

        client: RawClient = Boto3RawClient(self.create_s3_client(), self)
        if self.enable_tracing:
            client = LoggingClient(client)
        return client
