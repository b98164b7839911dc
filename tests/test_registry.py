"""
Тесты реестра валидаторов.
"""

import threading

from config.settings import BusinessRules, NegotiationRules
from validators.base import EntityValidator
from validators.negotiation_validator import NegotiationValidator
from validators.registry import VALIDATOR_BUILDERS, ValidatorRegistry


class TestValidatorRegistry:
    """Ленивое создание и кэширование валидаторов"""

    def test_same_instance_on_repeated_lookup(self, registry):
        assert registry.get_validator("certifications") is registry.get_validator("certifications")

    def test_every_supported_entity_builds(self, registry):
        for entity_type in registry.supported_entity_types():
            validator = registry.get_validator(entity_type)
            assert isinstance(validator, EntityValidator)
            assert validator.entity_type == entity_type

    def test_unknown_entity(self, registry):
        assert registry.get_validator("spaceships") is None
        assert not registry.is_supported("spaceships")

    def test_generic_fallback_accepts_anything(self, registry):
        validator = registry.get_any_validator("spaceships")
        assert validator is registry.get_any_validator("spaceships")
        assert validator.validate_create({"anything": 1}).is_valid

    def test_clear_cache_builds_new_instance(self, registry):
        first = registry.get_validator("orders")
        registry.clear_cache()
        assert registry.get_validator("orders") is not first

    def test_business_rules_are_passed_to_validators(self):
        rules = BusinessRules(negotiation=NegotiationRules(max_discount_percent=70))
        validator = ValidatorRegistry(rules).get_validator("negotiations")
        assert isinstance(validator, NegotiationValidator)
        assert validator.validate_price_change(1000, 400).is_valid

    def test_concurrent_first_lookup_yields_one_instance(self, registry):
        seen = []
        barrier = threading.Barrier(8)

        def lookup():
            barrier.wait()
            seen.append(registry.get_validator("shipments"))

        threads = [threading.Thread(target=lookup) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len({id(validator) for validator in seen}) == 1

    def test_builders_cover_all_entities(self):
        assert len(VALIDATOR_BUILDERS) == 17
