import logging

from botocore.exceptions import BotoCoreError, ClientError
from tqdm import tqdm

from .exceptions import ImageInventoryError
from .pool import BoundedTaskPool
from .query_client import DESCRIBE_TASKS_LIMIT

logger = logging.getLogger(__name__)


def service_name_from_arn(arn):
    """Short service name: the last non-empty path segment of the ARN."""
    parts = [part for part in arn.split("/") if part]
    return parts[-1] if parts else arn


def batched(items, size):
    if size < 1:
        raise ValueError(f"batch size must be at least 1, got {size}")
    items = list(items)
    return [items[i : i + size] for i in range(0, len(items), size)]


class OwnershipIndex:
    """Maps a key (task definition or image) to the set of services using it."""

    def __init__(self):
        self._owners = {}

    def add(self, key, service_names):
        self._owners.setdefault(key, set()).update(service_names)

    def get(self, key):
        return frozenset(self._owners.get(key, ()))

    def keys(self):
        return list(self._owners)

    def as_dict(self):
        return {key: set(names) for key, names in self._owners.items()}

    def __contains__(self, key):
        return key in self._owners

    def __len__(self):
        return len(self._owners)


class ImageInventory:
    def __init__(
        self,
        client,
        cluster,
        max_workers: int = 5,
        batch_size: int = DESCRIBE_TASKS_LIMIT,
        show_progress: bool = True,
    ):
        if not 1 <= batch_size <= DESCRIBE_TASKS_LIMIT:
            raise ValueError(
                f"batch_size must be between 1 and {DESCRIBE_TASKS_LIMIT}, got {batch_size}"
            )
        self.client = client
        self.cluster = cluster
        self.max_workers = max_workers
        self.batch_size = batch_size
        self.show_progress = show_progress
        self.failures = []  # (stage, item, error)

    def _progress(self, total, desc):
        return tqdm(total=total, desc=desc, disable=not self.show_progress)

    def _record_failure(self, stage, item, error):
        logger.warning("%s failed for %s: %s", stage, item, error)
        self.failures.append((stage, item, error))

    def discover_services(self):
        """Return {short_name: service_arn} for every service in the cluster."""
        try:
            service_arns = self.client.list_services(self.cluster)
        except (ClientError, BotoCoreError) as e:
            raise ImageInventoryError(
                f"Failed to list services in cluster '{self.cluster}': {e}"
            )

        services = {}
        for arn in service_arns:
            name = service_name_from_arn(arn)
            if name in services and services[name] != arn:
                logger.debug("Service name %s is shared by %s and %s", name, services[name], arn)
            services[name] = arn
        return services

    def resolve_tasks(self, service_names):
        """Return (task_arns, task_to_service) for the running tasks of each service."""
        task_arns = []
        task_to_service = {}

        pool = BoundedTaskPool(self.max_workers)
        with self._progress(len(service_names), "Listing tasks") as bar:

            def merge(result):
                if result.ok:
                    for task_arn in result.value:
                        if task_arn not in task_to_service:
                            task_arns.append(task_arn)
                        task_to_service[task_arn] = result.item
                else:
                    self._record_failure("list_tasks", result.item, result.error)
                bar.update(1)

            pool.run(
                service_names,
                lambda name: self.client.list_tasks(self.cluster, name),
                on_complete=merge,
            )
        return task_arns, task_to_service

    def resolve_task_definitions(self, task_arns, task_to_service):
        """Describe tasks in batches and index each task definition by its services."""
        definitions = OwnershipIndex()
        batches = batched(task_arns, self.batch_size)

        with self._progress(len(batches), "Describing tasks") as bar:
            for batch in batches:
                try:
                    described = self.client.describe_tasks(self.cluster, batch)
                except Exception as e:
                    self._record_failure("describe_tasks", f"batch of {len(batch)}", e)
                    continue
                finally:
                    bar.update(1)

                for task_arn, definition_arn in described:
                    service_name = task_to_service.get(task_arn)
                    if service_name is None:
                        logger.debug("Skipping task %s with no known service", task_arn)
                        continue
                    definitions.add(definition_arn, [service_name])
        return definitions

    def resolve_images(self, definitions):
        """Describe each task definition and fan its services out to every image."""
        images = OwnershipIndex()
        definition_arns = definitions.keys()

        pool = BoundedTaskPool(self.max_workers)
        with self._progress(len(definition_arns), "Describing task defs") as bar:

            def merge(result):
                if result.ok:
                    services = definitions.get(result.item)
                    for image in result.value:
                        if image:
                            images.add(image, services)
                else:
                    self._record_failure("describe_task_definition", result.item, result.error)
                bar.update(1)

            pool.run(definition_arns, self.client.describe_task_definition, on_complete=merge)
        return images

    def run(self):
        print(f"Fetching services in cluster '{self.cluster}'...")
        services = self.discover_services()
        if not services:
            print("No services found.")
            return None

        print("Fetching task ARNs for each service...")
        task_arns, task_to_service = self.resolve_tasks(list(services))
        if not task_arns:
            print("No tasks found.")
            return None

        print("Describing tasks to get task definitions...")
        definitions = self.resolve_task_definitions(task_arns, task_to_service)

        print("Describing task definitions to get container images...")
        return self.resolve_images(definitions).as_dict()
