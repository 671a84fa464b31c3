"""
Unit tests for OrderNumberGenerator and the configuration it reads.

1. prefix + (max id + 1), optional "<label>-" in front
2. SettingsConfiguration defaults
3. against the Django store: numbers never repeat, even after the highest order is purged
"""
import pytest
from unittest.mock import MagicMock

from orderentry.configuration import SettingsConfiguration, StaticConfiguration
from orderentry.models import Order
from orderentry.numbering import OrderNumberGenerator
from tests.conftest import ConceptFactory


def _store_with_max(max_id):
    store = MagicMock()
    store.get_maximum_order_id.return_value = max_id
    return store


class TestGenerate:

    def test_prefix_and_next_id(self):
        store = _store_with_max(41)
        generator = OrderNumberGenerator(store, StaticConfiguration(prefix='ORDER-'))

        assert generator.generate() == 'ORDER-42'
        store.record_issued_order_id.assert_called_once_with(42)

    def test_deployment_label_prepended(self):
        generator = OrderNumberGenerator(
            _store_with_max(41), StaticConfiguration(prefix='ORDER-', label='SITEA'),
        )

        assert generator.generate() == 'SITEA-ORDER-42'

    def test_empty_label_skipped(self):
        generator = OrderNumberGenerator(_store_with_max(0), StaticConfiguration(label=''))

        assert generator.generate() == 'ORDER-1'

    def test_custom_prefix(self):
        generator = OrderNumberGenerator(_store_with_max(9), StaticConfiguration(prefix='RX'))

        assert generator.generate() == 'RX10'


class TestSettingsConfiguration:

    def test_reads_settings(self, settings):
        settings.ORDER_NUMBER_PREFIX = 'LAB-'
        settings.IMPLEMENTATION_ID = 'SITEA'

        config = SettingsConfiguration()

        assert config.order_number_prefix() == 'LAB-'
        assert config.deployment_label() == 'SITEA'

    def test_defaults(self, settings):
        del settings.ORDER_NUMBER_PREFIX
        settings.IMPLEMENTATION_ID = ''

        config = SettingsConfiguration()

        assert config.order_number_prefix() == 'ORDER-'
        assert config.deployment_label() is None


@pytest.mark.django_db
class TestNumbersFromStore:

    def test_consecutive_saves_get_distinct_numbers(self, service, patient):
        first = service.save_order(Order(patient=patient, concept=ConceptFactory()))
        second = service.save_order(Order(patient=patient, concept=ConceptFactory()))

        assert first.order_number != second.order_number

    def test_purged_highest_order_number_not_reissued(self, service, patient):
        first = service.save_order(Order(patient=patient, concept=ConceptFactory()))
        issued = first.order_number
        service.purge_order(first)

        second = service.save_order(Order(patient=patient, concept=ConceptFactory()))

        assert second.order_number != issued

    def test_get_new_order_number_advances(self, service):
        assert service.get_new_order_number() != service.get_new_order_number()
