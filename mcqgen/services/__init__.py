"""
서비스 레이어
Parsing, generation, persistence and export logic
"""
from mcqgen.services.auth_service import (
    AuthService,
    get_auth_service,
    get_current_user,
)
from mcqgen.services.mcq_parser import parse, missing_fields, split_sections
from mcqgen.services.mcq_generator import GenerationResult, generate_mcq, rewrite_scenario

__all__ = [
    # Auth
    "AuthService",
    "get_auth_service",
    "get_current_user",

    # Parser
    "parse",
    "missing_fields",
    "split_sections",

    # Generation
    "GenerationResult",
    "generate_mcq",
    "rewrite_scenario",
]
