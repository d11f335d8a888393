from unittest.mock import MagicMock, patch

import ecs_images
from ecsimages.exceptions import ImageInventoryError


class TestMain:
    def test_missing_cluster(self, capsys):
        assert ecs_images.main([]) == 1
        assert "--cluster is required" in capsys.readouterr().err

    @patch("ecs_images.ImageInventory")
    @patch("ecs_images.AWSSessions")
    def test_prints_report(self, mock_aws_sessions, mock_inventory_class, capsys):
        mock_inventory = MagicMock()
        mock_inventory.run.return_value = {"repo/app:1": {"svc-a", "svc-b"}}
        mock_inventory.failures = []
        mock_inventory_class.return_value = mock_inventory

        assert ecs_images.main(["--cluster", "my-cluster", "--no-progress"]) == 0

        out = capsys.readouterr().out
        assert "repo/app:1" in out
        assert "    - svc-a" in out
        mock_aws_sessions.return_value.get_session.assert_called_once_with(
            profile_name=None, region_name="us-east-1"
        )
        args, kwargs = mock_inventory_class.call_args
        assert args[1] == "my-cluster"
        assert kwargs["max_workers"] == 5
        assert kwargs["show_progress"] is False

    @patch("ecs_images.ImageInventory")
    @patch("ecs_images.AWSSessions")
    def test_empty_result_exits_zero(self, mock_aws_sessions, mock_inventory_class, capsys):
        mock_inventory_class.return_value.run.return_value = None
        assert ecs_images.main(["--cluster", "my-cluster"]) == 0
        assert "Unique container image URIs" not in capsys.readouterr().out

    @patch("ecs_images.ImageInventory")
    @patch("ecs_images.AWSSessions")
    def test_warns_about_failures(self, mock_aws_sessions, mock_inventory_class, capsys):
        mock_inventory = MagicMock()
        mock_inventory.run.return_value = {}
        mock_inventory.failures = [("list_tasks", "svc-a", RuntimeError("boom"))]
        mock_inventory_class.return_value = mock_inventory

        assert ecs_images.main(["--cluster", "my-cluster"]) == 0
        assert "1 request(s) failed" in capsys.readouterr().err

    @patch("ecs_images.AWSSessions")
    def test_session_failure_exits_non_zero(self, mock_aws_sessions, capsys):
        mock_aws_sessions.return_value.get_session.side_effect = ImageInventoryError(
            "Failed to create AWS session with profile 'prod': no credentials"
        )
        assert ecs_images.main(["--cluster", "my-cluster", "--profile", "prod"]) == 1
        assert "Failed to create AWS session" in capsys.readouterr().err
