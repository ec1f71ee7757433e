"""
Configuration management for the addresses CLI.
Handles loading and validating configuration from environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

from ..schema import SchemaConfig

OUTPUT_FORMATS = ['text', 'json']

@dataclass
class Config:
    """Configuration settings for the addresses CLI."""
    
    # Database settings
    database_url: str
    schema: SchemaConfig = field(default_factory=SchemaConfig)
    
    # Import settings
    batch_size: int = 100
    error_limit: int = 1000
    
    # Logging settings
    log_level: str = 'INFO'
    
    # Output settings
    output_format: str = 'text'
    
    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> 'Config':
        """Create configuration from environment variables.
        
        Args:
            env_file: Optional path to .env file
            
        Returns:
            Config: Configuration instance
            
        Raises:
            ValueError: If required environment variables are missing
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()
            
        database_url = os.getenv('DATABASE_URL')
        if not database_url:
            raise ValueError("DATABASE_URL environment variable is required")

        defaults = SchemaConfig()
        schema = SchemaConfig(
            addresses_table=os.getenv('ADDRESSES_TABLE', defaults.addresses_table),
            owner_type_column=os.getenv('ADDRESSES_OWNER_TYPE_COLUMN', defaults.owner_type_column),
            owner_id_column=os.getenv('ADDRESSES_OWNER_ID_COLUMN', defaults.owner_id_column),
            relation_column=os.getenv('ADDRESSES_RELATION_COLUMN', defaults.relation_column),
            relation_name=os.getenv('ADDRESSES_RELATION_NAME', defaults.relation_name)
        )
            
        return cls(
            database_url=database_url,
            schema=schema,
            batch_size=int(os.getenv('BATCH_SIZE', '100')),
            error_limit=int(os.getenv('ERROR_LIMIT', '1000')),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            output_format=os.getenv('OUTPUT_FORMAT', 'text')
        )
    
    def validate(self) -> bool:
        """Validate configuration settings.
        
        Returns:
            bool: True if configuration is valid

        Raises:
            ValueError: On the first invalid setting
        """
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if self.error_limit <= 0:
            raise ValueError("error_limit must be positive")
            
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of: {', '.join(OUTPUT_FORMATS)}")
            
        return True
