"""Configuration settings for the application."""
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict

from finance_api.errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "Personal Finance API"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    # "mongo" for the real database, "memory" for local runs and tests
    storage_backend: str = "mongo"

    # MongoDB Atlas credentials
    db_username: str = ""
    db_password: str = ""
    db_cluster_host: str = "cluster0.wcellxl.mongodb.net"
    mongodb_uri: str = ""

    database_name: str = "Personal_Finance_Management_App"
    transactions_collection: str = "add"
    users_collection: str = "user"

    def build_mongo_uri(self) -> str:
        """
        Build the MongoDB connection URI.

        An explicit ``mongodb_uri`` wins; otherwise an Atlas SRV URI is built
        from the username, password and cluster host.

        Raises:
            ConfigurationError: If no URI is given and credentials are missing
        """
        if self.mongodb_uri:
            return self.mongodb_uri

        if not self.db_username or not self.db_password:
            raise ConfigurationError(
                "DB_USERNAME and DB_PASSWORD must be set (or MONGODB_URI) to use the mongo backend"
            )

        return (
            f"mongodb+srv://{quote_plus(self.db_username)}:{quote_plus(self.db_password)}"
            f"@{self.db_cluster_host}/?retryWrites=true&w=majority"
        )


settings = Settings()
