import uuid
from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models
from django.utils import timezone


class Concept(models.Model):
    uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    name = models.CharField(max_length=255)
    concept_class = models.CharField(max_length=50, default='Misc')
    retired = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'concepts'

    def __str__(self):
        return self.name


class Patient(models.Model):
    uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    mrn = models.CharField(max_length=6, unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    dob = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'patients'


class OrderType(models.Model):
    uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, default='')
    retired = models.BooleanField(default=False)
    retire_reason = models.CharField(max_length=255, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_types'


class OrderGroup(models.Model):
    uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='order_groups')
    voided = models.BooleanField(default=False)
    void_reason = models.CharField(max_length=255, blank=True, null=True)
    voided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        blank=True, null=True, related_name='+',
    )
    date_voided = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_groups'

    @property
    def pending_members(self):
        """Orders added in memory that the store has not attached yet."""
        return self.__dict__.setdefault('_pending_members', [])

    @property
    def members(self):
        persisted = []
        if self.pk is not None:
            persisted = list(self.orders.order_by('group_position', 'id'))
        return persisted + [o for o in self.pending_members if o not in persisted]

    def add_member(self, order):
        self.pending_members.append(order)


class Order(models.Model):
    class Action(models.TextChoices):
        NEW = 'NEW', 'New'
        DISCONTINUE = 'DISCONTINUE', 'Discontinue'

    class Kind(models.TextChoices):
        GENERIC = 'generic', 'Generic'
        DRUG = 'drug', 'Drug'

    uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    order_number = models.CharField(max_length=50, unique=True)
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='orders')
    concept = models.ForeignKey(Concept, on_delete=models.PROTECT, related_name='orders')
    order_type = models.ForeignKey(
        OrderType, on_delete=models.PROTECT, blank=True, null=True, related_name='orders',
    )
    order_action = models.CharField(max_length=20, choices=Action.choices, default=Action.NEW)
    kind = models.CharField(max_length=20, choices=Kind.choices, default=Kind.GENERIC)
    instructions = models.TextField(blank=True, default='')

    # dosage fields, only meaningful for Kind.DRUG
    dose = models.DecimalField(max_digits=10, decimal_places=3, blank=True, null=True)
    dose_units = models.CharField(max_length=50, blank=True, default='')
    frequency = models.CharField(max_length=100, blank=True, default='')

    signed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT,
        blank=True, null=True, related_name='+',
    )
    date_signed = models.DateTimeField(blank=True, null=True)
    activated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT,
        blank=True, null=True, related_name='+',
    )
    date_activated = models.DateTimeField(blank=True, null=True)
    date_filled = models.DateTimeField(blank=True, null=True)
    filler = models.CharField(max_length=255, blank=True, null=True)

    discontinued = models.BooleanField(default=False)
    discontinued_date = models.DateTimeField(blank=True, null=True)
    discontinued_reason = models.ForeignKey(
        Concept, on_delete=models.PROTECT, blank=True, null=True, related_name='+',
    )
    discontinued_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT,
        blank=True, null=True, related_name='+',
    )

    voided = models.BooleanField(default=False)
    void_reason = models.CharField(max_length=255, blank=True, null=True)
    voided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        blank=True, null=True, related_name='+',
    )
    date_voided = models.DateTimeField(blank=True, null=True)

    # set on DISCONTINUE orders: the order being terminated
    previous_order = models.ForeignKey(
        'self', on_delete=models.PROTECT, blank=True, null=True, related_name='discontinuation_orders',
    )
    order_group = models.ForeignKey(
        OrderGroup, on_delete=models.SET_NULL, blank=True, null=True, related_name='orders',
    )
    group_position = models.PositiveIntegerField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'

    def __str__(self):
        return self.order_number or f'<unsaved order {self.uuid}>'

    @property
    def has_dosage(self):
        return self.kind == self.Kind.DRUG

    @property
    def is_signed(self):
        return self.signed_by_id is not None and self.date_signed is not None

    @property
    def is_activated(self):
        return self.activated_by_id is not None and self.date_activated is not None

    @property
    def is_filled(self):
        return self.date_filled is not None

    def is_discontinued(self, as_of=None):
        """True if the order was discontinued at or before ``as_of`` (default: now)."""
        if self.voided or not self.discontinued or self.discontinued_date is None:
            return False
        if as_of is None:
            as_of = timezone.now()
        return self.discontinued_date <= as_of

    def is_current(self, as_of=None):
        if as_of is None:
            as_of = timezone.now()
        if self.voided or self.order_action != self.Action.NEW:
            return False
        if self.date_activated is None or self.date_activated > as_of:
            return False
        return not self.is_discontinued(as_of)

    def clean(self):
        errors = {}
        if self.has_dosage:
            if self.dose is None:
                errors['dose'] = 'Drug orders require a dose.'
            if not self.dose_units:
                errors['dose_units'] = 'Drug orders require dose units.'
        elif self.dose is not None or self.dose_units or self.frequency:
            errors['kind'] = 'Only drug orders may carry dosage fields.'
        if (self.signed_by_id is None) != (self.date_signed is None):
            errors['date_signed'] = 'signed_by and date_signed must be set together.'
        if self.order_action == self.Action.DISCONTINUE and self.previous_order_id is None:
            errors['previous_order'] = 'Discontinue orders must reference the order they stop.'
        if errors:
            raise DjangoValidationError(errors)


class OrderNumberCounter(models.Model):
    """Single row recording the highest order id ever issued in an order number."""

    last_issued_id = models.BigIntegerField(default=0)

    class Meta:
        db_table = 'order_number_counter'
