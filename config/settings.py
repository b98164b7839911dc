"""
MODULE: config.settings
RESPONSIBILITY: Application configuration loading and validation.
ALLOWED: os, dotenv, dataclasses.
FORBIDDEN: Complex business logic, database connections (only config).
ERRORS: ValueError (validation).

Конфигурация приложения и бизнес-лимиты маркетплейса.
Все значения читаются из окружения / .env, у каждого есть значение по умолчанию.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Any, Optional
import os
from dotenv import load_dotenv
from loguru import logger


@dataclass(frozen=True)
class DatabaseConfig:
    """Конфигурация базы данных"""
    host: str
    database: str
    user: str
    password: str
    port: int

    def get_connection_string(self) -> str:
        """Получить строку подключения для psycopg2"""
        return f"host={self.host} dbname={self.database} user={self.user} password={self.password} port={self.port}"


@dataclass(frozen=True)
class AppConfig:
    """Основная конфигурация приложения"""
    app_name: str
    app_version: str
    log_level: str
    log_dir: str
    log_rotation: str
    log_retention: str


@dataclass(frozen=True)
class NegotiationRules:
    """Лимиты переговоров о цене"""
    max_discount_percent: float = 50.0
    min_price_difference_percent: float = 1.0
    max_counter_offers: int = 5
    max_notes_length: int = 1000
    max_expiry_days: int = 30


@dataclass(frozen=True)
class CertificationRules:
    """Лимиты сертификатов"""
    min_validity_months: int = 6
    max_validity_years: int = 5
    max_documents: int = 10
    max_notes_length: int = 1000


@dataclass(frozen=True)
class QualityReportRules:
    """Лимиты отчетов о качестве"""
    min_score: float = 0.0
    max_score: float = 100.0
    max_defect_percentage: float = 30.0
    max_defects: int = 20
    max_defect_length: int = 100
    max_notes_length: int = 2000


@dataclass(frozen=True)
class ShipmentRules:
    """Лимиты отправок"""
    max_weight_kg: float = 10000.0
    max_instructions_length: int = 1000


@dataclass(frozen=True)
class OrderRules:
    """Лимиты заказов и позиций заказа"""
    min_amount: float = 1.0
    max_amount: float = 1000000.0
    max_quantity_per_item: int = 10000
    max_price_per_unit: float = 100000.0


@dataclass(frozen=True)
class PaymentRules:
    """Лимиты платежей"""
    min_amount: float = 1.0
    max_amount: float = 1000000.0


@dataclass(frozen=True)
class ReviewRules:
    """Лимиты отзывов"""
    min_rating: int = 1
    max_rating: int = 5
    min_comment_length: int = 10
    max_comment_length: int = 1000
    max_admin_notes_length: int = 500


@dataclass(frozen=True)
class MessageRules:
    """Лимиты сообщений"""
    min_content_length: int = 1
    max_content_length: int = 2000
    max_attachments: int = 5
    max_bulk_ids: int = 50


@dataclass(frozen=True)
class CatalogRules:
    """Лимиты задач, товаров, объявлений и профилей"""
    name_max_length: int = 200
    description_max_length: int = 2000
    unit_max_length: int = 50
    full_name_max_length: int = 100


@dataclass(frozen=True)
class DisputeRules:
    """Лимиты споров"""
    min_reason_length: int = 10
    max_description_length: int = 2000
    max_evidence: int = 10
    max_resolution_length: int = 2000


@dataclass(frozen=True)
class InventoryRules:
    """Лимиты складских остатков розницы"""
    max_quantity: int = 1000000
    max_price: float = 100000.0


@dataclass(frozen=True)
class ColdChainRules:
    """Лимиты журнала холодовой цепи"""
    min_temperature_c: float = -40.0
    max_temperature_c: float = 60.0
    safe_min_temperature_c: float = 0.0
    safe_max_temperature_c: float = 8.0


@dataclass(frozen=True)
class BusinessRules:
    """Все бизнес-лимиты маркетплейса"""
    negotiation: NegotiationRules = field(default_factory=NegotiationRules)
    certification: CertificationRules = field(default_factory=CertificationRules)
    quality_report: QualityReportRules = field(default_factory=QualityReportRules)
    shipment: ShipmentRules = field(default_factory=ShipmentRules)
    order: OrderRules = field(default_factory=OrderRules)
    payment: PaymentRules = field(default_factory=PaymentRules)
    review: ReviewRules = field(default_factory=ReviewRules)
    message: MessageRules = field(default_factory=MessageRules)
    catalog: CatalogRules = field(default_factory=CatalogRules)
    dispute: DisputeRules = field(default_factory=DisputeRules)
    inventory: InventoryRules = field(default_factory=InventoryRules)
    cold_chain: ColdChainRules = field(default_factory=ColdChainRules)


class Config:
    """
    Главный класс конфигурации, загружающий все настройки из .env файла
    """

    def __init__(self, env_file: Optional[str] = None):
        """
        Инициализация конфигурации

        Args:
            env_file: Путь к .env файлу (опционально)
        """
        self._load_environment(env_file)
        self.database = self._load_database_config()
        self.app = self._load_app_config()
        self.business_rules = self._load_business_rules()

    def _load_environment(self, env_file: Optional[str]) -> None:
        """Загрузка переменных окружения"""
        try:
            if env_file and os.path.exists(env_file):
                load_dotenv(env_file)
            else:
                load_dotenv()
        except Exception as e:
            logger.warning(f"Не удалось загрузить .env файл: {e}")

    def _get_env_var(self, key: str, default: Any = None, required: bool = False) -> str:
        """
        Получение переменной окружения с валидацией

        Args:
            key: Ключ переменной
            default: Значение по умолчанию
            required: Обязательная ли переменная

        Returns:
            Значение переменной

        Raises:
            ValueError: Если обязательная переменная не найдена
        """
        value = os.getenv(key)

        if value is None:
            if required:
                raise ValueError(f"Обязательная переменная окружения {key} не найдена")
            return default

        return value

    def _get_env_float(self, key: str, default: float = 0.0) -> float:
        """Получение float переменной из окружения"""
        try:
            return float(self._get_env_var(key, default))
        except (TypeError, ValueError) as e:
            logger.warning(f"Неверный формат float для {key}: {e}, используется значение по умолчанию: {default}")
            return default

    def _get_env_int(self, key: str, default: int = 0) -> int:
        """Получение int переменной из окружения"""
        try:
            return int(self._get_env_var(key, default))
        except (TypeError, ValueError) as e:
            logger.warning(f"Неверный формат int для {key}: {e}, используется значение по умолчанию: {default}")
            return default

    def _get_env_bool(self, key: str, default: bool = False) -> bool:
        """Получение bool переменной из окружения"""
        value = self._get_env_var(key, default)
        if isinstance(value, bool):
            return value
        return value.lower() in ('true', '1', 'yes', 'y')

    def _load_database_config(self) -> DatabaseConfig:
        """Загрузка конфигурации базы данных маркетплейса"""
        return DatabaseConfig(
            host=self._get_env_var("DB_HOST", "localhost"),
            database=self._get_env_var("DB_DATABASE", "marketplace"),
            user=self._get_env_var("DB_USER", "postgres"),
            password=self._get_env_var("DB_PASSWORD", ""),
            port=self._get_env_int("DB_PORT", 5432)
        )

    def _load_app_config(self) -> AppConfig:
        """Загрузка основной конфигурации приложения"""
        return AppConfig(
            app_name=self._get_env_var("APP_NAME", "Фермерский маркетплейс"),
            app_version=self._get_env_var("APP_VERSION", "1.0.0"),
            log_level=self._get_env_var("LOG_LEVEL", "INFO"),
            log_dir=self._get_env_var("LOG_DIR", "logs"),
            log_rotation=self._get_env_var("LOG_ROTATION", "10 MB"),
            log_retention=self._get_env_var("LOG_RETENTION", "30 days")
        )

    def _load_business_rules(self) -> BusinessRules:
        """Загрузка бизнес-лимитов (переопределяются через окружение)"""
        negotiation = NegotiationRules()
        certification = CertificationRules()
        quality = QualityReportRules()
        shipment = ShipmentRules()
        order = OrderRules()
        payment = PaymentRules()
        review = ReviewRules()
        message = MessageRules()
        return BusinessRules(
            negotiation=NegotiationRules(
                max_discount_percent=self._get_env_float(
                    "NEGOTIATION_MAX_DISCOUNT_PERCENT", negotiation.max_discount_percent),
                min_price_difference_percent=self._get_env_float(
                    "NEGOTIATION_MIN_PRICE_DIFFERENCE_PERCENT", negotiation.min_price_difference_percent),
                max_counter_offers=self._get_env_int(
                    "NEGOTIATION_MAX_COUNTER_OFFERS", negotiation.max_counter_offers),
                max_notes_length=self._get_env_int(
                    "NEGOTIATION_MAX_NOTES_LENGTH", negotiation.max_notes_length),
                max_expiry_days=self._get_env_int(
                    "NEGOTIATION_MAX_EXPIRY_DAYS", negotiation.max_expiry_days),
            ),
            certification=CertificationRules(
                min_validity_months=self._get_env_int(
                    "CERTIFICATION_MIN_VALIDITY_MONTHS", certification.min_validity_months),
                max_validity_years=self._get_env_int(
                    "CERTIFICATION_MAX_VALIDITY_YEARS", certification.max_validity_years),
                max_documents=self._get_env_int(
                    "CERTIFICATION_MAX_DOCUMENTS", certification.max_documents),
                max_notes_length=self._get_env_int(
                    "CERTIFICATION_MAX_NOTES_LENGTH", certification.max_notes_length),
            ),
            quality_report=QualityReportRules(
                max_defect_percentage=self._get_env_float(
                    "QUALITY_MAX_DEFECT_PERCENTAGE", quality.max_defect_percentage),
                max_defects=self._get_env_int("QUALITY_MAX_DEFECTS", quality.max_defects),
                max_notes_length=self._get_env_int("QUALITY_MAX_NOTES_LENGTH", quality.max_notes_length),
            ),
            shipment=ShipmentRules(
                max_weight_kg=self._get_env_float("SHIPMENT_MAX_WEIGHT_KG", shipment.max_weight_kg),
            ),
            order=OrderRules(
                min_amount=self._get_env_float("ORDER_MIN_AMOUNT", order.min_amount),
                max_amount=self._get_env_float("ORDER_MAX_AMOUNT", order.max_amount),
                max_quantity_per_item=self._get_env_int(
                    "ORDER_MAX_QUANTITY_PER_ITEM", order.max_quantity_per_item),
                max_price_per_unit=self._get_env_float(
                    "ORDER_MAX_PRICE_PER_UNIT", order.max_price_per_unit),
            ),
            payment=PaymentRules(
                min_amount=self._get_env_float("PAYMENT_MIN_AMOUNT", payment.min_amount),
                max_amount=self._get_env_float("PAYMENT_MAX_AMOUNT", payment.max_amount),
            ),
            review=ReviewRules(
                min_comment_length=self._get_env_int(
                    "REVIEW_MIN_COMMENT_LENGTH", review.min_comment_length),
                max_comment_length=self._get_env_int(
                    "REVIEW_MAX_COMMENT_LENGTH", review.max_comment_length),
            ),
            message=MessageRules(
                max_content_length=self._get_env_int(
                    "MESSAGE_MAX_CONTENT_LENGTH", message.max_content_length),
                max_attachments=self._get_env_int("MESSAGE_MAX_ATTACHMENTS", message.max_attachments),
            ),
        )

    def validate(self) -> bool:
        """
        Валидация конфигурации

        Returns:
            True если конфигурация валидна
        """
        try:
            if not all([self.database.host, self.database.database, self.database.user]):
                raise ValueError("Не все обязательные параметры БД заполнены")

            rules = self.business_rules
            if not 0 < rules.negotiation.max_discount_percent <= 100:
                raise ValueError("Максимальная скидка должна быть в диапазоне (0, 100]")
            if rules.order.min_amount > rules.order.max_amount:
                raise ValueError("Минимальная сумма заказа больше максимальной")
            if rules.payment.min_amount > rules.payment.max_amount:
                raise ValueError("Минимальная сумма платежа больше максимальной")
            if rules.certification.min_validity_months > rules.certification.max_validity_years * 12:
                raise ValueError("Минимальный срок действия сертификата больше максимального")

            logger.info("Конфигурация прошла валидацию")
            return True

        except Exception as e:
            logger.error(f"Ошибка валидации конфигурации: {e}")
            return False

    def to_dict(self) -> Dict[str, Any]:
        """Преобразование конфигурации в словарь (без паролей)"""
        return {
            "database": {
                "host": self.database.host,
                "database": self.database.database,
                "user": self.database.user,
                "port": self.database.port
            },
            "app": {
                "app_name": self.app.app_name,
                "app_version": self.app.app_version,
                "log_level": self.app.log_level
            },
            "business_rules": asdict(self.business_rules),
        }


# Создание глобального экземпляра конфигурации
config = Config()
