# tiffin/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Literal, Optional
from decimal import Decimal
from datetime import date, datetime


class CartItemIn(BaseModel):
    """Pozycja z menu dodawana do koszyka (zawsze +1)."""

    item_id: str = Field(..., min_length=1, description="ID pozycji menu")


class CartItemOut(BaseModel):
    id: str
    name: str
    price: Decimal
    quantity: int


class CartOut(BaseModel):
    cart_id: int
    user_id: str
    status: str
    version: int
    items: List[CartItemOut]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    expires_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class CheckoutFormIn(BaseModel):
    """Dane klienta z formularza checkoutu. Wymagalnosc sprawdza serwis."""

    first_name: str = ""
    last_name: str = ""
    address_line1: str = ""
    address_line2: Optional[str] = None
    city: str = ""
    zipcode: str = ""
    phone: str = ""
    email: str = ""


class CheckoutStagedOut(BaseModel):
    cart_id: int
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    redirect_to: str


class ConfirmIn(BaseModel):
    cart_id: int = Field(..., gt=0, description="ID koszyka (musi być > 0)")


class AddressOut(BaseModel):
    line1: str
    line2: Optional[str] = None
    city: str
    zipcode: str


class ContactOut(BaseModel):
    phone: str
    email: str


class CustomerDetailsOut(BaseModel):
    first_name: str
    last_name: str
    address: AddressOut
    contact: ContactOut


class OrderItemOut(BaseModel):
    id: str
    name: str
    price: Decimal
    quantity: int


class OrderOut(BaseModel):
    id: int
    order_ref: str
    user_id: str
    user_email: Optional[str] = None
    customer_details: CustomerDetailsOut
    items: List[OrderItemOut]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    status: str
    created_at: datetime
    updated_at: datetime


class ConfirmOut(BaseModel):
    outcome: Literal["created", "already_completed"]
    order: Optional[OrderOut] = None
    redirect_to: Optional[str] = None


class StatusUpdateIn(BaseModel):
    status: str = ""


class SubscriptionIn(BaseModel):
    """Nowa subskrypcja. Cena i end_date liczone po stronie serwera."""

    subscription_type: str = ""
    user_name: str = ""
    user_phone: str = ""
    address_line1: str = ""
    city: str = ""
    province: str = ""
    zipcode: str = ""
    city_quarter: str = ""
    start_date: Optional[date] = None
    meal_preferences: Optional[str] = None


class SubscriptionUpdate(BaseModel):
    subscription_type: Optional[str] = None
    user_name: Optional[str] = None
    user_phone: Optional[str] = None
    address_line1: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    zipcode: Optional[str] = None
    city_quarter: Optional[str] = None
    start_date: Optional[date] = None
    meal_preferences: Optional[str] = None


class SubscriptionOut(BaseModel):
    id: int
    user_id: str
    subscription_type: str
    price: Decimal
    address_line1: str
    city: str
    province: str
    zipcode: str
    city_quarter: str
    start_date: date
    end_date: date
    meal_preferences: Optional[str] = None
    user_name: str
    user_phone: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminRegisterIn(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    security_code: str = ""


class AdminOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    code: str

    model_config = ConfigDict(from_attributes=True)


class MenuItemIn(BaseModel):
    id: str = Field(..., min_length=1, max_length=128)
    category: str = Field(..., min_length=1)
    name: str = ""
    description: str = ""
    price: Optional[Decimal] = None


class MenuItemUpdate(BaseModel):
    """Aktualizacja pozycji; new_id zmienia klucz (nowy rekord + usuniecie starego)."""

    name: str = ""
    description: str = ""
    price: Optional[Decimal] = None
    new_id: Optional[str] = Field(None, max_length=128)


class MenuItemOut(BaseModel):
    id: str
    category: str
    name: str
    description: str
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class MenuCategoryOut(BaseModel):
    name: str
    items: List[MenuItemOut]
