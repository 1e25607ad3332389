"""Unit tests for main application entry point."""

import os
from unittest.mock import MagicMock, Mock, patch

import pytest
from fastapi import FastAPI

from main import create_application


@pytest.mark.unit
class TestCreateApplication:
    """Tests for create_application function."""

    @patch("main.setup_observability")
    @patch("main.configure_logging")
    @patch("main.create_s3_client")
    @patch("main.create_dynamodb_resource")
    @patch.dict(os.environ, {"LOG_LEVEL": "DEBUG", "S3_BUCKET_NAME": "catering-assets"}, clear=True)
    def test_creates_application_with_all_dependencies(
        self,
        mock_create_dynamodb: Mock,
        mock_create_s3: Mock,
        mock_configure_logging: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test that the app is built with one service per resource."""
        mock_create_dynamodb.return_value = MagicMock()
        mock_create_s3.return_value = MagicMock()

        app = create_application()

        assert isinstance(app, FastAPI)
        mock_configure_logging.assert_called_once_with("DEBUG")
        mock_setup_observability.assert_called_once_with(app)
        assert app.state.menu_service.resource_name == "Menu"
        assert app.state.gallery_service.image_store.bucket_name == "catering-assets"
        assert app.state.quote_service.repository.table_name == "catering-quotes"
        assert app.state.review_service.repository.claims_table_name == "catering-image-claims"

    @patch("main.configure_logging")
    @patch("main.create_s3_client")
    @patch("main.create_dynamodb_resource")
    @patch.dict(os.environ, {}, clear=True)
    def test_missing_bucket_fails(
        self, mock_create_dynamodb: Mock, mock_create_s3: Mock, mock_configure_logging: Mock
    ) -> None:
        """Test that the bucket name is required."""
        with pytest.raises(ValueError, match="S3_BUCKET_NAME"):
            create_application()
