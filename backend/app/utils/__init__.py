from app.utils.hashing import generate_hash, generate_chain_hash, generate_hmac_sha256, signatures_match
from app.utils.validators import is_valid_id, validate_domain_name, validate_duration, validate_file_format
from app.utils.dates import utcnow, add_years

__all__ = [
    "generate_hash", "generate_chain_hash", "generate_hmac_sha256", "signatures_match",
    "is_valid_id", "validate_domain_name", "validate_duration", "validate_file_format",
    "utcnow", "add_years",
]
