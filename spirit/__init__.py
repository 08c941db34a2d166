"""
Spirit Gateway: invite-gated HTTP gateway for the Spirit chat persona.
"""

__version__ = "1.0.0"
