from django.utils import timezone
from django.utils.dateparse import parse_datetime
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import InvalidArgumentError
from .identity import RequestIdentityProvider
from .models import Concept, OrderGroup, Patient
from .serializers import serialize_order, serialize_order_group, serialize_order_list
from .services import get_order_service
from .types import OrderStatus


def _service_for(request):
    return get_order_service(identity=RequestIdentityProvider(request))


def _not_found(what, key):
    return InvalidArgumentError(
        message=f'{what} not found',
        code=f'{what.upper().replace(" ", "_")}_NOT_FOUND',
        detail={'id': key},
        http_status=404,
    )


def _get_order(service, order_id):
    order = service.get_order(order_id)
    if order is None:
        raise _not_found('Order', order_id)
    return order


def _get_group(service, group_id):
    group = service.get_order_group(group_id)
    if group is None:
        raise _not_found('Order group', group_id)
    return group


def _parse_date(data, field):
    raw = data.get(field)
    if raw in (None, ''):
        return None
    value = parse_datetime(str(raw))
    if value is None:
        raise InvalidArgumentError(
            message=f'{field} must be an ISO 8601 datetime.',
            code='INVALID_DATE',
            detail={'field': field, 'value': raw},
        )
    if timezone.is_naive(value):
        value = timezone.make_aware(value)
    return value


# --- order transitions ---
# each handler: (service, order, request data) → order

def _sign(service, order, data):
    return service.sign_order(order, when=_parse_date(data, 'date'))


def _activate(service, order, data):
    return service.activate_order(order, when=_parse_date(data, 'date'))


def _sign_and_activate(service, order, data):
    return service.sign_and_activate_order(order, when=_parse_date(data, 'date'))


def _discontinue(service, order, data):
    reason_id = data.get('reason_concept_id')
    reason = Concept.objects.filter(pk=reason_id).first() if reason_id else None
    if reason_id and reason is None:
        raise _not_found('Concept', reason_id)
    return service.discontinue_order(order, reason, _parse_date(data, 'date'))


def _fill(service, order, data):
    return service.fill_order(order, data.get('filler'), _parse_date(data, 'date_filled'))


def _void(service, order, data):
    return service.void_order(order, data.get('reason'))


def _unvoid(service, order, data):
    return service.unvoid_order(order)


ORDER_ACTIONS = {
    'sign': _sign,
    'activate': _activate,
    'sign-and-activate': _sign_and_activate,
    'discontinue': _discontinue,
    'fill': _fill,
    'void': _void,
    'unvoid': _unvoid,
}


class OrderDetailView(APIView):
    """GET /api/orders/<order_id>/"""

    def get(self, request, order_id):
        order = _get_order(_service_for(request), order_id)
        return Response(serialize_order(order))


class OrderActionView(APIView):
    """POST /api/orders/<order_id>/<action>/ — one lifecycle transition."""

    def post(self, request, order_id, action):
        handler = ORDER_ACTIONS.get(action)
        if handler is None:
            raise InvalidArgumentError(
                message=f'Unknown order action: {action!r}.',
                code='UNKNOWN_ACTION',
                detail={'known_actions': list(ORDER_ACTIONS)},
                http_status=404,
            )
        service = _service_for(request)
        order = handler(service, _get_order(service, order_id), request.data)
        return Response(serialize_order(order))


class PatientOrdersView(APIView):
    """GET /api/patients/<patient_id>/orders/?status=active|notvoided|complete|any"""

    def get(self, request, patient_id):
        patient = Patient.objects.filter(pk=patient_id).first()
        if patient is None:
            raise _not_found('Patient', patient_id)
        raw_status = request.query_params.get('status', OrderStatus.NOTVOIDED.value)
        try:
            status = OrderStatus(raw_status)
        except ValueError:
            raise InvalidArgumentError(
                message=f'Unknown status filter: {raw_status!r}.',
                code='INVALID_STATUS',
                detail={'known_statuses': [s.value for s in OrderStatus]},
            ) from None

        orders = _service_for(request).get_patient_orders(patient, status)
        return Response(serialize_order_list(orders))


class OrderGroupCreateView(APIView):
    """POST /api/order-groups/ — new group from draft orders, signed and activated together."""

    def post(self, request):
        service = _service_for(request)
        patient_id = request.data.get('patient_id')
        patient = Patient.objects.filter(pk=patient_id).first() if patient_id else None
        if patient is None:
            raise _not_found('Patient', patient_id)

        group = OrderGroup(patient=patient)
        for order_id in request.data.get('order_ids') or []:
            order = _get_order(service, order_id)
            if order.patient_id != patient.pk:
                raise InvalidArgumentError(
                    message='Every order in a group must belong to the group patient.',
                    code='ORDER_PATIENT_MISMATCH',
                    detail={'order_id': order.pk},
                )
            group.add_member(order)

        group = service.sign_and_activate_order_group(group, when=_parse_date(request.data, 'date'))
        return Response(serialize_order_group(group), status=201)


class OrderGroupDetailView(APIView):
    """GET /api/order-groups/<group_id>/"""

    def get(self, request, group_id):
        group = _get_group(_service_for(request), group_id)
        return Response(serialize_order_group(group))


class OrderGroupVoidView(APIView):
    """POST /api/order-groups/<group_id>/void/ and /unvoid/"""

    unvoid = False

    def post(self, request, group_id):
        service = _service_for(request)
        group = _get_group(service, group_id)
        if self.unvoid:
            group = service.unvoid_order_group(group)
        else:
            group = service.void_order_group(group, request.data.get('reason'))
        return Response(serialize_order_group(group))
