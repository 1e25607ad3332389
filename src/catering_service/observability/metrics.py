"""Custom metrics for the catering content service."""

from opentelemetry import metrics

meter = metrics.get_meter("catering-svc")

resource_operation_counter = meter.create_counter(
    name="catering_resource_operations_total",
    description="Total number of completed resource operations by resource and operation",
    unit="1",
)

image_upload_counter = meter.create_counter(
    name="catering_image_uploads_total",
    description="Total number of images stored by key prefix",
    unit="1",
)

image_upload_size_histogram = meter.create_histogram(
    name="catering_image_upload_bytes",
    description="Size of stored images",
    unit="By",
)

orphaned_asset_counter = meter.create_counter(
    name="catering_orphaned_assets_total",
    description="Images left in the object store after a failed cleanup",
    unit="1",
)


def record_resource_operation(resource: str, operation: str) -> None:
    """Record a completed resource operation.

    Args:
        resource: Resource name (e.g., "Menu", "Gallery")
        operation: Operation performed (e.g., "create", "delete")
    """
    resource_operation_counter.add(1, {"resource": resource, "operation": operation})


def record_image_upload(prefix: str, size_bytes: int) -> None:
    """Record a stored image.

    Args:
        prefix: Key prefix the image was stored under
        size_bytes: Image size in bytes
    """
    image_upload_counter.add(1, {"prefix": prefix})
    image_upload_size_histogram.record(size_bytes, {"prefix": prefix})


def record_orphaned_asset(resource: str) -> None:
    """Record an image that could not be removed and is now orphaned."""
    orphaned_asset_counter.add(1, {"resource": resource})
