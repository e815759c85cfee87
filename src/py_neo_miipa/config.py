# Copyright (c) 2025-2026 Gowtham Adamane Rao. All Rights Reserved.
#
# Licensed under the Prosperity Public License 3.0.0 (the "License").
# You may not use this file except in compliance with the License.
# You may obtain a copy of the License in the LICENSE file at the root
# of this repository, or at: https://prosperitylicense.com/versions/3.0.0
#
# Commercial use beyond a 30-day trial requires a separate license.
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    """
    Manages the application's configuration settings.
    Utilizes Pydantic's BaseSettings to allow for environment variable overrides.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="PYNEOMIIPA_",
        extra="ignore"
    )

    # --- Neo4j Database ---
    neo4j_uri: str = Field("neo4j://localhost:7687", description="Neo4j instance URI.")
    neo4j_user: str = Field("neo4j", description="Neo4j username.")
    neo4j_password: str = Field("password", description="Neo4j password.")
    neo4j_database: str = Field("neo4j", description="Neo4j target database name.")

    # --- Query Defaults ---
    default_regions: List[str] = Field(
        default=["USA", "EU", "APAC"],
        description="Regions whose epidemiology is summed when a caller does not request any."
    )
    default_indication_limit: int = Field(10, description="Default size of the ranked indication list.")
    default_mutation_limit: int = Field(50, description="Default size of the ranked mutation list.")
    default_discovery_limit: int = Field(10, description="Default number of undiscovered catalog entries returned.")

    # --- Research Import ---
    research_source: str = Field(
        "Deep_Research",
        description="Source tag written onto every node created by a research import."
    )
    research_year: int = Field(2024, description="Reference year stamped on generated epidemiology and prevalence records.")


# Instantiate a global settings object to be used throughout the application
settings = Settings()
