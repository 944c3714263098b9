"""
Configuration management for the CLI client
"""
from pydantic import BaseModel, Field
from dotenv import load_dotenv
import os


class Config(BaseModel):
    """Client configuration loaded from .env file"""

    api_base_url: str = Field(default="http://127.0.0.1:5000")
    api_timeout: int = Field(default=30)

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from .env file with sensible defaults"""
        load_dotenv()
        return cls(
            api_base_url=os.getenv("UPLOAD_API_URL", "http://127.0.0.1:5000"),
            api_timeout=int(os.getenv("UPLOAD_API_TIMEOUT", "30")),
        )
