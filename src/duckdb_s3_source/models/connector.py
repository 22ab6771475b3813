"""Models for connector inputs: credentials, descriptors and host options."""

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class Credentials(BaseModel):
    """Static storage credentials injected into the DuckDB session.

    Accepts both snake_case field names and the host's camelCase option
    names. The secret key is held as a SecretStr so it never shows up in
    reprs or serialized output.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    access_key_id: str = Field(default="", alias="accessKeyId")
    secret_access_key: SecretStr = Field(default=SecretStr(""), alias="secretAccessKey")
    region: str = ""

    @property
    def is_anonymous(self) -> bool:
        """True when no key pair is configured (public datasets only)."""
        return not self.access_key_id and not self.secret_access_key.get_secret_value()

    def secret_values(self) -> tuple[str, ...]:
        """Raw values that must be scrubbed from messages."""
        return (self.secret_access_key.get_secret_value(),)


class DatasetRef(BaseModel):
    """One dataset listed in a descriptor file.

    Attributes:
        name: Display name, used as the result title.
        location: Storage URI or local path of the dataset.
    """

    name: str = Field(..., min_length=1, description="Dataset display name")
    location: str = Field(
        ...,
        min_length=1,
        alias="path",
        description="Storage URI of the dataset",
    )

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {"name": "orders", "path": "s3://my-bucket/orders.parquet"}
        },
    }


class Descriptor(BaseModel):
    """Parsed descriptor file."""

    files: list[DatasetRef] = Field(default_factory=list)


class ConnectorOption(BaseModel):
    """Option descriptor shown on the host's configuration screen."""

    title: str
    description: str
    type: str = "string"
    secret: bool = False
    shown: bool | None = None
    default: str = ""


class ConnectionTestResult(BaseModel):
    """Outcome of a connection test. Failures carry a readable reason."""

    success: bool
    reason: str | None = None

    @classmethod
    def passed(cls) -> "ConnectionTestResult":
        return cls(success=True)

    @classmethod
    def failed(cls, reason: str) -> "ConnectionTestResult":
        return cls(success=False, reason=reason)
