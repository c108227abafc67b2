"""Consent protocol email templates: template key -> subject/body (Jinja)."""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, StrictUndefined, Template

_SIGNATURE = "\n\nWarm regards,\nThe {{ app_name }} team"

# key -> (subject_template, body_template)
_DEFAULT_TEMPLATES: dict[str, tuple[str, str]] = {
    "password_reset_code": (
        "{{ initiator_name }} asked to reset your shared password",
        "Hi{% if partner_display_name %} {{ partner_display_name }}{% endif %},\n\n"
        "{{ initiator_name }}{% if initiator_email %} ({{ initiator_email }}){% endif %} "
        "started a password reset for your shared account.\n"
        "If you agree, give them this code: {{ code }}\n\n"
        "The code expires at {{ expires_at }}. If you did not expect this, ignore this email; "
        "nothing changes without the code." + _SIGNATURE,
    ),
    "password_reset_link": (
        "Your password reset was approved",
        "Hi{% if requester_name %} {{ requester_name }}{% endif %},\n\n"
        "{{ approving_partner_name or 'Your partner' }} confirmed your reset request.\n"
        "Choose a new password here: {{ link }}\n\n"
        "This link expires at {{ expires_at }} and works once." + _SIGNATURE,
    ),
    "password_share": (
        "Your shared account has a new password",
        "Hi{% if partner_name %} {{ partner_name }}{% endif %},\n\n"
        "{{ initiator_name or 'Your partner' }} just changed the password of your shared account.\n"
        "View the new password once here: {{ link }}\n\n"
        "The link expires at {{ expires_at }} and can be opened only one time." + _SIGNATURE,
    ),
    "account_deletion_code": (
        "Account deletion verification code",
        "Hi{% if recipient_name %} {{ recipient_name }}{% endif %},\n\n"
        "{% if requires_partner_share %}"
        "{{ initiator_name or 'Your partner' }}{% if initiator_email %} ({{ initiator_email }}){% endif %} "
        "asked to delete your shared account. If you agree, share this code with them: {{ code }}\n"
        "{% else %}"
        "We received a request to delete your account. Your verification code is: {{ code }}\n"
        "{% endif %}"
        "\nThe code expires at {{ expires_at }}. Deleting the account is permanent." + _SIGNATURE,
    ),
    "account_deletion_notice": (
        "Your shared account is being deleted",
        "Hello,\n\nThe deletion of the shared account{% if account_name %} {{ account_name }}{% endif %} "
        "was approved and is now being carried out. Photos, messages, and favorites are removed "
        "permanently." + _SIGNATURE,
    ),
    "email_verification": (
        "Verify your email address for {{ app_name }}",
        "Hello{% if username %} {{ username }}{% endif %},\n\n"
        "{% if role == 'partner' %}Your partner registered a shared account with this address. {% endif %}"
        "Confirm your email address here: {{ link }}\n\n"
        "Both partners need to confirm before you can sign in." + _SIGNATURE,
    ),
}


class NotificationTemplateRenderer:
    """Renders subject and body for a consent protocol email from a template key."""

    def __init__(
        self,
        templates: dict[str, tuple[str, str]] | None = None,
        app_name: str = "Duet",
    ) -> None:
        """Initialize with optional template dict; falls back to _DEFAULT_TEMPLATES."""
        self._app_name = app_name
        self._env = Environment(autoescape=False, undefined=StrictUndefined)
        self._compiled: dict[str, tuple[Template, Template]] = {
            key: (self._env.from_string(subject), self._env.from_string(body))
            for key, (subject, body) in (templates or _DEFAULT_TEMPLATES).items()
        }

    def render(self, template_key: str, **context: Any) -> tuple[str, str]:
        """Render subject and body. Raises KeyError if the key is unknown."""
        if template_key not in self._compiled:
            raise KeyError(f"Unknown notification template: {template_key}")
        context.setdefault("app_name", self._app_name)
        subject_tpl, body_tpl = self._compiled[template_key]
        return subject_tpl.render(**context).strip(), body_tpl.render(**context)
