"""
MODULE: core.models
RESPONSIBILITY: Define domain data structures (TypedDict records, enums).
ALLOWED: Enums, Typing.
FORBIDDEN: Business logic, database operations.
ERRORS: None.

Модели данных фермерского маркетплейса.

Каждая сущность описана TypedDict-записью (строка таблицы) и, если у нее есть
жизненный цикл, перечислением статусов. Набор колонок TypedDict используется
репозиториями для проверки имен колонок до построения SQL.
"""

from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Type, TypedDict


class TaskStatus(Enum):
    """Статусы полевых задач фермера"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(Enum):
    """Приоритет задачи (вычисляется по сроку, не хранится)"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ListingStatus(Enum):
    AVAILABLE = "available"
    SOLD_OUT = "sold_out"
    DELISTED = "delisted"


class ProductCategory(Enum):
    GRAINS = "grains"
    VEGETABLES = "vegetables"
    FRUITS = "fruits"
    DAIRY = "dairy"
    POULTRY = "poultry"
    LIVESTOCK = "livestock"
    SPICES = "spices"
    OTHER = "other"


class ProfileRole(Enum):
    FARMER = "farmer"
    DISTRIBUTOR = "distributor"
    RETAILER = "retailer"


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ReviewStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    FLAGGED = "flagged"


class CertificationStatus(Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"
    EXPIRED = "expired"
    SUSPENDED = "suspended"


class CertificationType(Enum):
    ORGANIC = "organic"
    FAIR_TRADE = "fair_trade"
    GAP = "gap"
    HACCP = "haccp"
    ISO_22000 = "iso_22000"
    GLOBALGAP = "globalgap"
    RAINFOREST_ALLIANCE = "rainforest_alliance"
    NON_GMO = "non_gmo"
    HALAL = "halal"
    KOSHER = "kosher"


class QualityReportStatus(Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class QualityGrade(Enum):
    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C = "C"
    D = "D"


class NegotiationStatus(Enum):
    PENDING = "pending"
    COUNTER_OFFERED = "counter_offered"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


class ShipmentStatus(Enum):
    PENDING = "pending"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    FAILED = "failed"
    RETURNED = "returned"
    CANCELLED = "cancelled"


class MessageStatus(Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    DELETED = "deleted"


class DisputeStatus(Enum):
    OPEN = "open"
    UNDER_REVIEW = "under_review"
    ESCALATED = "escalated"
    RESOLVED = "resolved"
    REJECTED = "rejected"
    CLOSED = "closed"


class DisputeType(Enum):
    QUALITY = "quality"
    QUANTITY = "quantity"
    DELIVERY = "delivery"
    PAYMENT = "payment"
    DAMAGE = "damage"
    OTHER = "other"


class InventoryStatus(Enum):
    ACTIVE = "active"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"


class BlockchainTxStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


def enum_values(enum_cls: Type[Enum]) -> Tuple[str, ...]:
    """Значения перечисления в порядке объявления"""
    return tuple(member.value for member in enum_cls)


class FarmTask(TypedDict, total=False):
    id: str
    farmer_id: str
    title: str
    description: Optional[str]
    status: str
    due_date: Optional[str]
    created_at: str
    updated_at: str


class Product(TypedDict, total=False):
    id: str
    name: str
    description: Optional[str]
    category: str
    image_url: Optional[str]
    created_at: str
    updated_at: str


class ProductListing(TypedDict, total=False):
    id: str
    farmer_id: str
    product_id: str
    price_per_unit: float
    quantity_available: float
    unit_of_measure: str
    harvest_date: Optional[str]
    quality_report_id: Optional[str]
    status: str
    created_at: str
    updated_at: str


class Profile(TypedDict, total=False):
    id: str
    role: str
    full_name: str
    contact_email: str
    phone_number: Optional[str]
    address: Optional[str]
    is_verified: bool
    created_at: str
    updated_at: str


class Order(TypedDict, total=False):
    id: str
    buyer_id: str
    seller_id: Optional[str]
    total_amount: float
    status: str
    shipping_address: Optional[Dict[str, Any]]
    created_at: str
    updated_at: str


class OrderItem(TypedDict, total=False):
    id: str
    order_id: str
    listing_id: str
    quantity: float
    price_at_purchase: float
    created_at: str
    updated_at: str


class Payment(TypedDict, total=False):
    id: str
    order_id: str
    amount: float
    status: str
    stripe_charge_id: Optional[str]
    created_at: str
    updated_at: str


class Review(TypedDict, total=False):
    id: str
    reviewer_id: str
    listing_id: str
    farmer_id: Optional[str]
    rating: int
    comment: Optional[str]
    status: str
    admin_notes: Optional[str]
    created_at: str
    updated_at: str


class Certification(TypedDict, total=False):
    id: str
    farmer_id: str
    certification_type: str
    certificate_number: str
    issuing_body: str
    issue_date: str
    expiry_date: str
    document_urls: List[str]
    verification_notes: Optional[str]
    verified_by: Optional[str]
    status: str
    created_at: str
    updated_at: str


class QualityReport(TypedDict, total=False):
    id: str
    product_id: str
    inspector_id: str
    farmer_id: str
    report_date: str
    overall_grade: str
    overall_score: float
    parameters: Dict[str, Any]
    defect_percentage: Optional[float]
    defects_found: List[str]
    quality_notes: str
    recommendations: Optional[str]
    approved_by: Optional[str]
    status: str
    created_at: str
    updated_at: str


class Negotiation(TypedDict, total=False):
    id: str
    order_id: str
    farmer_id: str
    buyer_id: str
    product_id: str
    original_price: float
    proposed_price: float
    final_price: Optional[float]
    counter_offer_count: int
    notes: Optional[str]
    expires_at: Optional[str]
    status: str
    created_at: str
    updated_at: str


class Shipment(TypedDict, total=False):
    id: str
    order_id: str
    carrier_name: str
    tracking_number: Optional[str]
    shipping_address: Dict[str, Any]
    pickup_address: Optional[Dict[str, Any]]
    estimated_delivery_date: Optional[str]
    actual_delivery_date: Optional[str]
    weight_kg: Optional[float]
    dimensions: Optional[Dict[str, Any]]
    shipping_cost: Optional[float]
    insurance_value: Optional[float]
    special_instructions: Optional[str]
    status: str
    created_at: str
    updated_at: str


class Message(TypedDict, total=False):
    id: str
    sender_id: str
    receiver_id: str
    order_id: Optional[str]
    content: str
    attachment_urls: List[str]
    status: str
    created_at: str
    updated_at: str


class Dispute(TypedDict, total=False):
    id: str
    order_id: str
    raised_by: str
    against_id: str
    dispute_type: str
    reason: str
    description: Optional[str]
    evidence_urls: List[str]
    amount_claimed: Optional[float]
    resolution: Optional[str]
    resolved_at: Optional[str]
    status: str
    created_at: str
    updated_at: str


class RetailerInventory(TypedDict, total=False):
    id: str
    retailer_id: str
    product_id: str
    listing_id: Optional[str]
    quantity: float
    reorder_level: float
    unit_price: Optional[float]
    last_restocked_at: Optional[str]
    status: str
    created_at: str
    updated_at: str


class ColdChainLog(TypedDict, total=False):
    id: str
    shipment_id: str
    recorded_at: str
    temperature_c: float
    humidity_percent: Optional[float]
    location: Optional[str]
    sensor_id: Optional[str]
    created_at: str
    updated_at: str


class BlockchainTxReference(TypedDict, total=False):
    id: str
    entity_type: str
    entity_id: str
    tx_hash: str
    network: str
    block_number: Optional[int]
    status: str
    created_at: str
    updated_at: str


def record_columns(record_type: Type[Any]) -> FrozenSet[str]:
    """Набор колонок, объявленных TypedDict-записью"""
    return frozenset(record_type.__annotations__.keys())
