"""
Connection factory for the search backends.

This module owns the long-lived MongoDB and Elasticsearch client handles.
Both are created lazily on first use and shared by every request.
"""

import asyncio
import logging
from typing import Any, Optional

from elasticsearch import AsyncElasticsearch
from pymongo import AsyncMongoClient

from ...shared.exceptions import DatabaseError
from ..config import EnvironmentConfig

logger = logging.getLogger(__name__)


class ConnectionFactory:
    """
    Factory for backend client handles.

    Concurrent first callers share a single initialization; a failed
    initialization leaves no handle behind, so the next caller tries
    again.
    """

    def __init__(self, config: EnvironmentConfig):
        """
        Initialize the factory.

        Args:
            config: Application configuration
        """
        self.config = config
        self._mongo_client: Optional[AsyncMongoClient] = None
        self._elasticsearch: Optional[AsyncElasticsearch] = None
        self._mongo_lock = asyncio.Lock()
        self._elasticsearch_lock = asyncio.Lock()

    async def mongo_database(self) -> Any:
        """
        Get the configured MongoDB database, connecting on first use.

        Returns:
            AsyncDatabase: Database handle

        Raises:
            DatabaseError: If the connection cannot be established
        """
        if self._mongo_client is None:
            async with self._mongo_lock:
                if self._mongo_client is None:
                    self._mongo_client = await self._connect_mongo()
        return self._mongo_client[self.config.get_mongodb_database()]

    async def recipes_collection(self) -> Any:
        """Get the recipes collection."""
        database = await self.mongo_database()
        return database[self.config.get_recipes_collection()]

    async def elasticsearch(self) -> AsyncElasticsearch:
        """
        Get the Elasticsearch client, connecting on first use.

        Returns:
            AsyncElasticsearch: Client handle

        Raises:
            DatabaseError: If the cluster cannot be reached
        """
        if self._elasticsearch is None:
            async with self._elasticsearch_lock:
                if self._elasticsearch is None:
                    self._elasticsearch = await self._connect_elasticsearch()
        return self._elasticsearch

    async def _connect_mongo(self) -> AsyncMongoClient:
        client = self._create_mongo_client()
        try:
            await client.admin.command("ping")
        except Exception as e:
            logger.error("Failed to connect to MongoDB: %s", e)
            await client.close()
            raise DatabaseError.from_exception("MongoDB connection", e) from e

        logger.info("Connected to MongoDB database %s", self.config.get_mongodb_database())
        return client

    async def _connect_elasticsearch(self) -> AsyncElasticsearch:
        client = self._create_elasticsearch_client()
        try:
            await client.info()
        except Exception as e:
            logger.error("Failed to connect to Elasticsearch: %s", e)
            await client.close()
            raise DatabaseError.from_exception("Elasticsearch connection", e) from e

        logger.info("Connected to Elasticsearch at %s", self.config.get_elasticsearch_url())
        return client

    def _create_mongo_client(self) -> AsyncMongoClient:
        return AsyncMongoClient(self.config.get_mongodb_uri())

    def _create_elasticsearch_client(self) -> AsyncElasticsearch:
        return AsyncElasticsearch(
            self.config.get_elasticsearch_url(),
            basic_auth=self.config.get_elasticsearch_credentials(),
            request_timeout=self.config.get_request_timeout()
        )

    async def close(self) -> None:
        """Close both client handles."""
        if self._mongo_client is not None:
            await self._mongo_client.close()
            self._mongo_client = None
        if self._elasticsearch is not None:
            await self._elasticsearch.close()
            self._elasticsearch = None
