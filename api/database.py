# api/database.py

import os
from pathlib import Path
from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from neo4j import GraphDatabase, Driver


# This class will manage the driver instance
class GraphDatabaseManager:
    def __init__(self):
        self.driver: Driver = None

    def connect(self):
        """Establishes the connection to the Neo4j database."""
        uri = os.getenv("NEO4J_URI")
        username = os.getenv("NEO4J_USERNAME")
        password = os.getenv("NEO4J_PASSWORD")

        if not uri:
            raise ValueError("Missing NEO4J_URI environment variable. Cannot connect to Neo4j.")
        if not username:
            raise ValueError(
                "Missing NEO4J_USERNAME environment variable. Cannot connect to Neo4j."
            )
        if not password:
            raise ValueError(
                "Missing NEO4J_PASSWORD environment variable. Cannot connect to Neo4j."
            )

        self.driver = GraphDatabase.driver(uri, auth=(username, password))

    def close(self):
        """Closes the connection."""
        if self.driver is not None:
            self.driver.close()
            self.driver = None


# Create a single instance of the manager for the application's lifecycle
graph_db_manager = GraphDatabaseManager()


# FastAPI dependency to get the database driver
def get_graph_db_driver() -> Driver:
    if graph_db_manager.driver is None:
        graph_db_manager.connect()
    return graph_db_manager.driver

