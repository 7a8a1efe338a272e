from safeshortener.models.short_link_model import ShortLinkModel
from safeshortener.models.outcome import AdmissionOutcome, RejectionReason


__all__ = [
    'ShortLinkModel',
    'AdmissionOutcome',
    'RejectionReason',
]
