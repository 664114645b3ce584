from pydantic import BaseModel, Field, field_validator

NOT_FOUND = "Not found"


class LookupRequest(BaseModel):
    address: str = Field(..., description="Free-form street address as typed by the user")

    @field_validator("address")
    @classmethod
    def _require_address(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("address field required")
        return value


class OwnerLookupResult(BaseModel):
    success: bool
    owner_name: str | None = Field(None, description="Most current owner as shown on the parcel page")
    mailing_address: str | None = Field(None, description="Owner mailing address from the parcel page")
    error: str | None = None

    @classmethod
    def found(cls, owner_name: str | None, mailing_address: str | None) -> "OwnerLookupResult":
        return cls(
            success=True,
            owner_name=owner_name or NOT_FOUND,
            mailing_address=mailing_address or NOT_FOUND,
        )

    @classmethod
    def failed(cls, error: str) -> "OwnerLookupResult":
        return cls(success=False, error=error)

    def to_response(self) -> dict:
        """Response body shape: unset optional fields are left out."""
        return self.model_dump(exclude_none=True)


class AddressRecord(BaseModel):
    raw: str
    normalized: str
