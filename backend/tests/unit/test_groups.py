"""
Unit tests for OrderGroupLifecycle.

1. sign_and_activate — only new, non-empty groups; all members or none
2. void / unvoid — group fields only, members untouched
3. lookups
"""
import pytest
from datetime import timedelta

from orderentry.exceptions import InvalidArgumentError, InvalidStateError
from orderentry.models import Order, OrderGroup
from tests.conftest import OrderFactory, OrderGroupFactory, UserFactory


@pytest.mark.django_db
class TestSignAndActivateGroup:

    def test_existing_group_always_rejected(self, service, patient):
        group = OrderGroupFactory(patient=patient)
        group.add_member(OrderFactory(patient=patient))

        with pytest.raises(InvalidStateError) as exc_info:
            service.sign_and_activate_order_group(group)

        assert exc_info.value.code == 'ORDER_GROUP_EXISTS'

    def test_existing_group_rejected_even_with_active_members(self, service, patient, active_order):
        group = OrderGroupFactory(patient=patient)
        group.add_member(active_order)

        with pytest.raises(InvalidStateError):
            service.sign_and_activate_order_group(group)

    def test_empty_group_rejected(self, service, patient):
        group = OrderGroup(patient=patient)

        with pytest.raises(InvalidStateError) as exc_info:
            service.sign_and_activate_order_group(group)

        assert exc_info.value.code == 'ORDER_GROUP_EMPTY'
        assert OrderGroup.objects.count() == 0

    def test_all_members_signed_and_activated(self, service, patient, clinician, clock):
        group = OrderGroup(patient=patient)
        first = OrderFactory(patient=patient)
        second = Order(patient=patient, concept=first.concept)
        group.add_member(first)
        group.add_member(second)

        group = service.sign_and_activate_order_group(group)

        assert group.pk is not None
        assert [m.pk for m in group.members] == [first.pk, second.pk]
        for member in group.members:
            assert member.signed_by == clinician
            assert member.date_activated == clock
            assert member.order_group_id == group.pk
        assert second.order_number.startswith('ORDER-')
        assert Order.objects.get(pk=second.pk).group_position == 1

    def test_explicit_actor_and_date_used_for_every_member(self, service, patient, clock):
        actor = UserFactory()
        when = clock - timedelta(hours=2)
        group = OrderGroup(patient=patient)
        group.add_member(OrderFactory(patient=patient))
        group.add_member(OrderFactory(patient=patient))

        group = service.sign_and_activate_order_group(group, actor, when)

        assert {m.activated_by_id for m in group.members} == {actor.pk}
        assert {m.date_signed for m in group.members} == {when}

    def test_member_failure_rolls_back_whole_group(self, service, patient):
        first = OrderFactory(patient=patient)
        second = service.sign_order(OrderFactory(patient=patient))
        group = OrderGroup(patient=patient)
        group.add_member(first)
        group.add_member(second)

        with pytest.raises(InvalidStateError) as exc_info:
            service.sign_and_activate_order_group(group)

        assert exc_info.value.code == 'ORDER_ALREADY_SIGNED'
        assert OrderGroup.objects.count() == 0
        assert Order.objects.get(pk=first.pk).date_signed is None
        assert Order.objects.get(pk=first.pk).date_activated is None
        assert first.date_signed is None
        assert first.date_activated is None
        assert group.pk is None


@pytest.mark.django_db
class TestSaveGroup:

    def test_unsaved_members_rejected(self, service, patient, draft_order):
        group = OrderGroup(patient=patient)
        group.add_member(draft_order)

        with pytest.raises(InvalidStateError) as exc_info:
            service.save_order_group(group)

        assert exc_info.value.code == 'ORDER_GROUP_MEMBER_UNSAVED'

    def test_members_attached_in_order(self, service, patient):
        orders = [OrderFactory(patient=patient) for _ in range(3)]
        group = OrderGroup(patient=patient)
        for order in orders:
            group.add_member(order)

        group = service.save_order_group(group)

        assert [m.pk for m in group.members] == [o.pk for o in orders]
        assert group.pending_members == []


@pytest.mark.django_db
class TestVoidGroup:

    def test_empty_reason_rejected(self, service):
        group = OrderGroupFactory()

        with pytest.raises(InvalidArgumentError):
            service.void_order_group(group, None)

        assert group.voided is False

    def test_void_does_not_cascade_to_members(self, service, patient, active_order, clinician, clock):
        group = OrderGroup(patient=patient)
        group.add_member(active_order)
        group = service.save_order_group(group)

        group = service.void_order_group(group, 'ordered on wrong patient')

        assert group.voided is True
        assert group.voided_by == clinician
        assert group.date_voided == clock
        assert Order.objects.get(pk=active_order.pk).voided is False

    def test_void_is_idempotent(self, service):
        group = service.void_order_group(OrderGroupFactory(), 'dup entry')
        voided_at = group.date_voided

        again = service.void_order_group(group, 'other')

        assert again is group
        assert again.void_reason == 'dup entry'
        assert again.date_voided == voided_at

    def test_unvoid_clears_fields(self, service):
        group = service.void_order_group(OrderGroupFactory(), 'dup entry')

        group = service.unvoid_order_group(group)

        stored = OrderGroup.objects.get(pk=group.pk)
        assert stored.voided is False
        assert stored.void_reason is None
        assert stored.voided_by_id is None
        assert stored.date_voided is None


@pytest.mark.django_db
class TestGroupLookups:

    def test_get_by_id_and_uuid(self, service):
        group = OrderGroupFactory()

        assert service.get_order_group(group.pk) == group
        assert service.get_order_group_by_uuid(group.uuid) == group
        assert service.get_order_group(group.pk + 1000) is None

    def test_get_by_patient(self, service, patient):
        mine = OrderGroupFactory(patient=patient)
        OrderGroupFactory()

        assert service.get_order_groups_by_patient(patient) == [mine]

    def test_patient_required(self, service):
        with pytest.raises(InvalidArgumentError) as exc_info:
            service.get_order_groups_by_patient(None)

        assert exc_info.value.code == 'PATIENT_REQUIRED'
