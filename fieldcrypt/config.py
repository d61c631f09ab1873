import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./fieldcrypt.db")
    FIELD_ENCRYPTION_SECRET: str = os.getenv("FIELD_ENCRYPTION_SECRET", "")
    ENCRYPTED_FIELDS: str = os.getenv("ENCRYPTED_FIELDS", "")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def field_encryption_options(self) -> dict:
        """Options for FieldEncryptionConfig.from_options, read from the environment."""
        fields = [name.strip() for name in self.ENCRYPTED_FIELDS.split(",") if name.strip()]
        return {"fields": fields, "secret": self.FIELD_ENCRYPTION_SECRET}


settings = Settings()
