# core/mixins/gym_scope.py

from rest_framework.exceptions import ValidationError

from core.constants import GymLocation
from core.permissions import is_admin


def validate_gym(value):
    if value not in GymLocation.values:
        raise ValidationError({'gym': f'Unknown gym location "{value}".'})
    return value


def scope_queryset(queryset, user, requested_gym=None, gym_field='gym'):
    """
    Query narrowing for list-style reads.
    Non-admins only ever see their assigned gym; admins see everything
    unless they ask for one gym explicitly. Foreign records are hidden, never rejected.
    """
    if not is_admin(user):
        return queryset.filter(**{gym_field: user.assigned_gym})
    if requested_gym:
        return queryset.filter(**{gym_field: validate_gym(requested_gym)})
    return queryset


class GymQuerysetMixin:
    """
    Enforces gym-based queryset filtering on list actions only.
    Targeted actions (retrieve/update/destroy) go through HasObjectGymAccess
    so a foreign record is answered with 403 instead of 404.
    """

    gym_field = 'gym'
    narrowed_actions = ('list', 'summary')

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action in self.narrowed_actions:
            return scope_queryset(
                qs,
                self.request.user,
                self.request.query_params.get('gym'),
                self.gym_field,
            )
        return qs
