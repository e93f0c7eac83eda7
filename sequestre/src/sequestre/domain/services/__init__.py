"""
Domain service interfaces.
"""

from sequestre.domain.services.i_account_service import IAccountService
from sequestre.domain.services.i_program import IProgram
from sequestre.domain.services.i_token_service import ITokenService

__all__ = ["IAccountService", "IProgram", "ITokenService"]
