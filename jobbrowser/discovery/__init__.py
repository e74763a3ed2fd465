"""Service discovery."""

from jobbrowser.discovery.service_wizard import ServiceWizardClient

__all__ = ["ServiceWizardClient"]
