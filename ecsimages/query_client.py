import logging

logger = logging.getLogger(__name__)

# describe_tasks accepts at most this many task ARNs per call
DESCRIBE_TASKS_LIMIT = 100


class ECSQueryClient:
    """Thin wrapper over the boto3 ECS client calls the inventory needs."""

    def __init__(self, ecs_client):
        self.ecs = ecs_client

    def list_services(self, cluster):
        service_arns = []
        paginator = self.ecs.get_paginator("list_services")
        for page in paginator.paginate(cluster=cluster):
            service_arns.extend(page.get("serviceArns", []))
        return service_arns

    def list_tasks(self, cluster, service_name):
        task_arns = []
        paginator = self.ecs.get_paginator("list_tasks")
        for page in paginator.paginate(cluster=cluster, serviceName=service_name):
            task_arns.extend(page.get("taskArns", []))
        return task_arns

    def describe_tasks(self, cluster, task_arns):
        """Return (task_arn, task_definition_arn) pairs for the given tasks."""
        if len(task_arns) > DESCRIBE_TASKS_LIMIT:
            raise ValueError(
                f"describe_tasks accepts at most {DESCRIBE_TASKS_LIMIT} tasks, got {len(task_arns)}"
            )
        response = self.ecs.describe_tasks(cluster=cluster, tasks=list(task_arns))
        for failure in response.get("failures", []):
            logger.debug(
                "describe_tasks failure for %s: %s",
                failure.get("arn"),
                failure.get("reason"),
            )
        return [
            (task["taskArn"], task["taskDefinitionArn"])
            for task in response.get("tasks", [])
            if task.get("taskArn") and task.get("taskDefinitionArn")
        ]

    def describe_task_definition(self, task_definition_arn):
        response = self.ecs.describe_task_definition(taskDefinition=task_definition_arn)
        containers = response["taskDefinition"].get("containerDefinitions", [])
        return [c["image"] for c in containers if c.get("image")]
