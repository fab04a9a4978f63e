from functools import lru_cache

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    PROJECT_NAME: str = "Wallet Gate"
    # Application settings
    HOST: str = "0.0.0.0"
    PORT: int = 3005
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Challenge / session secrets
    SECRET: str  # nonce salt, rotating it invalidates every outstanding nonce
    JWT_SECRET_KEY: str
    ENCODE_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_SECONDS: int = 24 * 60 * 60  # 1 day

    # IPFS storage gateway
    IPFS_HOST: str = "127.0.0.1"
    IPFS_PORT: int = 5001

    # Whitelist contract on Optimism Sepolia (chain 11155420)
    RPC_URL: str = "https://sepolia.optimism.io"
    WHITELIST_ADDRESS: str

    # TheGraph Studio
    GRAPH_API_URL: str = "https://api.studio.thegraph.com/query/71164/vd-practice-v1/version/latest"

    # Outbound call limits
    HTTP_TIMEOUT_SECONDS: float = 30.0
    RPC_TIMEOUT_SECONDS: float = 10.0

    @property
    def IPFS_URL(self) -> str:
        return f"http://{self.IPFS_HOST}:{self.IPFS_PORT}"


@lru_cache
def get_settings() -> Settings:
    """Load the settings once per process. Override this dependency in tests."""
    return Settings()
