import os
from dotenv import load_dotenv
from .config import (
    DEFAULT_EMAIL_DOMAIN,
    DEFAULT_IMPORT_MODE,
    DEFAULT_PASSWORD,
    Settings,
    build_settings,
)

IMPORT_MODES = {"MERGE", "WIPE", "UPSERT", "REPLACE"}

def load_settings(registry_json=None, output_dir=None, import_mode=None) -> Settings:
    load_dotenv()
    registry_json = registry_json or os.getenv("LEDGER_REGISTRY_JSON")
    output_dir = output_dir or os.getenv("LEDGER_OUTPUT_DIR")
    if not registry_json or not output_dir:
        raise ValueError("LEDGER_REGISTRY_JSON and LEDGER_OUTPUT_DIR must be provided")

    import_mode = (import_mode or os.getenv("LEDGER_IMPORT_MODE") or DEFAULT_IMPORT_MODE).upper()
    if import_mode not in IMPORT_MODES:
        raise ValueError(f"Unknown LEDGER_IMPORT_MODE: {import_mode}")

    return build_settings(
        registry_json,
        output_dir,
        email_domain=os.getenv("LEDGER_EMAIL_DOMAIN", DEFAULT_EMAIL_DOMAIN),
        default_password=os.getenv("LEDGER_DEFAULT_PASSWORD", DEFAULT_PASSWORD),
        import_mode=import_mode,
    )

def ensure_dirs(s: Settings):
    s.output_dir.mkdir(parents=True, exist_ok=True)
    s.statements_dir.mkdir(parents=True, exist_ok=True)
    s.registry_json.parent.mkdir(parents=True, exist_ok=True)
