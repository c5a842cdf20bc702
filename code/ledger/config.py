from dataclasses import dataclass
from pathlib import Path

DEFAULT_EMAIL_DOMAIN = "dinproperties.com.pk"
DEFAULT_PASSWORD = "password123"
DEFAULT_IMPORT_MODE = "MERGE"

@dataclass(frozen=True)
class Settings:
    registry_json: Path
    output_dir: Path
    statements_dir: Path
    email_domain: str = DEFAULT_EMAIL_DOMAIN
    default_password: str = DEFAULT_PASSWORD
    import_mode: str = DEFAULT_IMPORT_MODE

def build_settings(
    registry_json: str,
    output_dir: str,
    email_domain: str = DEFAULT_EMAIL_DOMAIN,
    default_password: str = DEFAULT_PASSWORD,
    import_mode: str = DEFAULT_IMPORT_MODE,
) -> Settings:
    out = Path(output_dir)
    return Settings(
        registry_json=Path(registry_json),
        output_dir=out,
        statements_dir=out / "statements",
        email_domain=email_domain,
        default_password=default_password,
        import_mode=import_mode.upper(),
    )
