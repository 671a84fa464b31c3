"""
Response serializers — ORM objects → JSON-able dicts.

Output formatting only; request parsing lives in views.py.
"""


def _iso(value):
    return value.isoformat() if value else None


def _user_ref(user):
    if user is None:
        return None
    return {'id': user.pk, 'username': user.get_username()}


def serialize_order(order):
    """Serialize an order with the fields relevant to its current state."""
    response = {
        'order_id': order.pk,
        'uuid': str(order.uuid),
        'order_number': order.order_number,
        'order_action': order.order_action,
        'kind': order.kind,
        'patient': {
            'name': f"{order.patient.first_name} {order.patient.last_name}",
            'mrn': order.patient.mrn,
        },
        'concept': order.concept.name,
        'order_type': order.order_type.name if order.order_type else None,
        'signed': order.is_signed,
        'activated': order.is_activated,
        'filled': order.is_filled,
        'discontinued': order.discontinued,
        'voided': order.voided,
        'created_at': _iso(order.created_at),
        'updated_at': _iso(order.updated_at),
    }

    if order.has_dosage:
        response['dosage'] = {
            'dose': str(order.dose) if order.dose is not None else None,
            'units': order.dose_units,
            'frequency': order.frequency,
        }
    if order.is_signed:
        response['signed_by'] = _user_ref(order.signed_by)
        response['date_signed'] = _iso(order.date_signed)
    if order.is_activated:
        response['activated_by'] = _user_ref(order.activated_by)
        response['date_activated'] = _iso(order.date_activated)
    if order.is_filled:
        response['filler'] = order.filler
        response['date_filled'] = _iso(order.date_filled)
    if order.discontinued:
        response['discontinuation'] = {
            'date': _iso(order.discontinued_date),
            'reason': order.discontinued_reason.name if order.discontinued_reason else None,
            'by': _user_ref(order.discontinued_by),
        }
    if order.voided:
        response['void'] = {
            'reason': order.void_reason,
            'by': _user_ref(order.voided_by),
            'date': _iso(order.date_voided),
        }
    if order.previous_order_id is not None:
        response['previous_order_id'] = order.previous_order_id

    return response


def serialize_order_list(orders):
    results = [
        {
            'order_id': order.pk,
            'order_number': order.order_number,
            'order_action': order.order_action,
            'concept': order.concept.name,
            'date_activated': _iso(order.date_activated),
            'discontinued': order.discontinued,
            'voided': order.voided,
        }
        for order in orders
    ]
    return {
        'count': len(results),
        'orders': results,
    }


def serialize_order_group(group):
    response = {
        'order_group_id': group.pk,
        'uuid': str(group.uuid),
        'patient_mrn': group.patient.mrn,
        'voided': group.voided,
        'members': [serialize_order(order) for order in group.members],
    }
    if group.voided:
        response['void'] = {
            'reason': group.void_reason,
            'by': _user_ref(group.voided_by),
            'date': _iso(group.date_voided),
        }
    return response
