"""
Module: test_metrics.py
Description: Unit tests for CloudWatch metrics publishing.
"""

from unittest.mock import MagicMock

import boto3
from botocore.exceptions import ClientError
from moto import mock_aws

from sqs_reader.reader.reader import ReadSummary
from sqs_reader.utils.metrics import MetricsClient


class TestMetricsClient:
    """Test cases for MetricsClient."""

    def test_publish_summary_single_request(self):
        """Test all run counters go out in one PutMetricData call."""
        cloudwatch = MagicMock()
        metrics = MetricsClient(namespace="SQSReaderTest", client=cloudwatch)

        published = metrics.publish_summary(
            ReadSummary(received=4, printed=4, transferred=3, deleted=2),
            dimensions={"Queue": "in"}
        )

        assert published is True
        cloudwatch.put_metric_data.assert_called_once()
        kwargs = cloudwatch.put_metric_data.call_args.kwargs
        assert kwargs["Namespace"] == "SQSReaderTest"
        assert [(d["MetricName"], d["Value"]) for d in kwargs["MetricData"]] == [
            ("MessagesRead", 4),
            ("MessagesTransferred", 3),
            ("MessagesDeleted", 2),
        ]
        assert all(d["Dimensions"] == [{"Name": "Queue", "Value": "in"}] for d in kwargs["MetricData"])

    def test_publish_summary_to_cloudwatch(self):
        with mock_aws():
            metrics = MetricsClient(namespace="SQSReaderTest", region_name="us-east-1")
            metrics.publish_summary(ReadSummary(received=1), dimensions={"Queue": "in"})

            cloudwatch = boto3.client("cloudwatch", region_name="us-east-1")
            listed = cloudwatch.list_metrics(Namespace="SQSReaderTest")["Metrics"]

        assert sorted(m["MetricName"] for m in listed) == [
            "MessagesDeleted", "MessagesRead", "MessagesTransferred"
        ]

    def test_put_metric_without_dimensions(self):
        cloudwatch = MagicMock()
        metrics = MetricsClient(client=cloudwatch)

        metrics.put_metric("ReadSeconds", 1.5, unit="Seconds")

        datum = cloudwatch.put_metric_data.call_args.kwargs["MetricData"][0]
        assert datum == {"MetricName": "ReadSeconds", "Value": 1.5, "Unit": "Seconds"}

    def test_failure_is_logged_not_raised(self):
        cloudwatch = MagicMock()
        cloudwatch.put_metric_data.side_effect = ClientError(
            error_response={"Error": {"Code": "AccessDenied", "Message": "Test error"}},
            operation_name="PutMetricData"
        )
        metrics = MetricsClient(client=cloudwatch)

        assert metrics.publish_summary(ReadSummary(received=1)) is False
        cloudwatch.put_metric_data.assert_called_once()
