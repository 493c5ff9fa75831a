# fund_crawler/shared/models/funds.py

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def _coerce_text(v: Any) -> Any:
    """The history API sends null, numbers and strings interchangeably."""
    if v is None:
        return ""
    if isinstance(v, bool):
        return str(v).lower()
    if isinstance(v, int | float):
        return str(v)
    return v


class FundInstrument(BaseModel):
    """
    One fund from the Eastmoney catalog.

    Immutable once parsed; rebuilt on every discovery cycle.
    """

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="Unique fund code, e.g. 000001")
    abridge: str = Field(default="", description="Abbreviated ticker-like code")
    name: str = Field(default="", description="Display name")
    type: str = Field(default="", description="Fund category")
    pinyin: str = Field(default="", description="Romanized name for search")

    def tags(self) -> dict[str, str]:
        """Tag set attached to every point written for this fund."""
        return {
            "code": self.code,
            "abridge": self.abridge,
            "name": self.name,
            "type": self.type,
            "pinyin": self.pinyin,
        }


class HistoryPoint(BaseModel):
    """One day's NAV record as returned by the history API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # ========== PERSISTED ==========
    date: str = Field(default="", alias="FSRQ", description="NAV date")
    unit_nav: str = Field(default="", alias="DWJZ", description="Unit NAV")
    cumulative_nav: str = Field(default="", alias="LJJZ", description="Cumulative NAV")
    growth_rate: str = Field(default="", alias="JZZZL", description="Daily growth rate")
    nav_type: str = Field(default="", alias="NAVTYPE")
    subscription_status: str = Field(default="", alias="SGZT")
    redemption_status: str = Field(default="", alias="SHZT")

    # ========== AUXILIARY ==========
    sdate: str = Field(default="", alias="SDATE")
    actual_yield: str = Field(default="", alias="ACTUALSYI")
    dividend_value: str = Field(default="", alias="FHFCZ")
    dividend_flag: str = Field(default="", alias="FHFCBZ")
    dtype: str = Field(default="", alias="DTYPE")
    dividend_note: str = Field(default="", alias="FHSP")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _coerce_text(v)


class HistoryDetails(BaseModel):
    """The `Data` object of a history response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    records: list[HistoryPoint] = Field(default_factory=list, alias="LSJZList")
    fund_type: str = Field(default="", alias="FundType")
    sy_type: str = Field(default="", alias="SYType")
    is_new_type: bool = Field(
        default=False, validation_alias=AliasChoices("isNewType", "IsNewType")
    )
    feature: str = Field(default="", alias="Feature")

    @field_validator("records", mode="before")
    @classmethod
    def set_records(cls, v):
        """Initialize records as empty list if None"""
        return v or []

    @field_validator("fund_type", "sy_type", "feature", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _coerce_text(v)

    @field_validator("is_new_type", mode="before")
    @classmethod
    def coerce_flag(cls, v):
        """Accept a JSON bool, 0/1, or their text forms; null means False."""
        if isinstance(v, str):
            return v.strip().lower() in ("true", "1")
        return bool(v)


class HistoryResponse(BaseModel):
    """Envelope of a per-fund, per-page history response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    err_code: int = Field(default=0, alias="ErrCode")
    err_msg: str = Field(default="", alias="ErrMsg")
    total_count: int = Field(default=0, alias="TotalCount")
    expansion: str = Field(default="", alias="Expansion")
    page_size: int = Field(default=0, alias="PageSize")
    page_index: int = Field(default=0, alias="PageIndex")
    data: HistoryDetails = Field(default_factory=HistoryDetails, alias="Data")

    @field_validator("err_msg", "expansion", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return _coerce_text(v)

    @field_validator("err_code", "total_count", "page_size", "page_index", mode="before")
    @classmethod
    def coerce_count(cls, v):
        return 0 if v is None else v

    @field_validator("data", mode="before")
    @classmethod
    def set_data(cls, v):
        """Initialize data as empty details if None"""
        return {} if v is None else v

    # ==================== PROPERTIES ====================

    @property
    def records(self) -> list[HistoryPoint]:
        return self.data.records

    @property
    def is_error(self) -> bool:
        return self.err_code != 0
