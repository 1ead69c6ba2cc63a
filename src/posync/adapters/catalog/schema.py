"""Pydantic models describing catalog query results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CatalogBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Reference(CatalogBaseModel):
    id: int | str


class StyleNumberNode(CatalogBaseModel):
    id: int | str
    style_number: str | None = Field(default=None, alias="styleNumber")


class PurchaseOrderRef(CatalogBaseModel):
    id: int | str | None = None
    order_numbers: str | None = Field(default=None, alias="orderNumbers")


class PurchaseOrderNode(CatalogBaseModel):
    id: int | str
    order_numbers: str | None = Field(default=None, alias="orderNumbers")
    style_numbers: list[StyleNumberNode] = Field(default_factory=list, alias="styleNumbers")


class BookingStyleNumber(StyleNumberNode):
    pos: list[PurchaseOrderRef] = Field(default_factory=list)


class PurchaseOrderPage(CatalogBaseModel):
    results: list[PurchaseOrderNode] = Field(default_factory=list)
    total_count: int | None = Field(default=None, alias="totalCount")


class StyleNumberPage(CatalogBaseModel):
    results: list[StyleNumberNode] = Field(default_factory=list)
    total_count: int | None = Field(default=None, alias="totalCount")


class ShipmentDetail(CatalogBaseModel):
    id: int | str
    purchase_orders: list[PurchaseOrderNode] = Field(default_factory=list, alias="purchaseOrders")
    style_numbers: list[Reference] = Field(default_factory=list, alias="styleNumbersRelation")
    companies: list[Reference] | Reference | None = Field(default=None, alias="companyRelation")


class BookingDetail(CatalogBaseModel):
    id: int | str
    style_numbers: list[BookingStyleNumber] = Field(
        default_factory=list, alias="styleNumberRelation"
    )
    customer: Reference | None = None
    purchase_orders: list[PurchaseOrderNode] = Field(default_factory=list, alias="pos")


class ShipmentPage(CatalogBaseModel):
    results: list[ShipmentDetail] = Field(default_factory=list)
    total_count: int | None = Field(default=None, alias="totalCount")


class BookingPage(CatalogBaseModel):
    results: list[BookingDetail] = Field(default_factory=list)
    total_count: int | None = Field(default=None, alias="totalCount")


class ActionPayload(CatalogBaseModel):
    results: Any = None


class ActionData(CatalogBaseModel):
    action: ActionPayload | None = None
