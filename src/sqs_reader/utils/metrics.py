"""
Module: metrics.py
Description: CloudWatch custom metrics publishing.

Publishes the per-run counters of the reader (messages read, transferred
and deleted) to CloudWatch, batched into a single PutMetricData call.

Key Components:
- MetricsClient: CloudWatch metrics client
- publish_summary(): Publish the counters of one read
- put_metric(): Publish a single ad-hoc metric
- Metrics failures are logged, never raised

Dependencies: boto3, botocore, typing, logger
Author: SQS Reader Team
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from sqs_reader.utils.logger import get_logger

if TYPE_CHECKING:
    from sqs_reader.reader.reader import ReadSummary

logger = get_logger(__name__)

SUMMARY_METRICS = (
    ('MessagesRead', 'received'),
    ('MessagesTransferred', 'transferred'),
    ('MessagesDeleted', 'deleted'),
)


def _datum(
    metric_name: str,
    value: float,
    unit: str = 'Count',
    dimensions: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    datum = {'MetricName': metric_name, 'Value': value, 'Unit': unit}
    if dimensions:
        datum['Dimensions'] = [
            {'Name': key, 'Value': str(dimension)}
            for key, dimension in sorted(dimensions.items())
        ]
    return datum


class MetricsClient:
    """CloudWatch metrics client for reader runs."""

    def __init__(
        self,
        namespace: str = "SQSReader",
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client: Any = None
    ):
        """
        Initialize metrics client.

        Args:
            namespace: CloudWatch metrics namespace
            region_name: AWS region for the CloudWatch client
            endpoint_url: Optional endpoint override
            client: Preconfigured boto3 CloudWatch client
        """
        self.namespace = namespace
        self.cloudwatch = client or boto3.client(
            'cloudwatch',
            region_name=region_name,
            endpoint_url=endpoint_url
        )

    def publish_summary(
        self,
        summary: "ReadSummary",
        dimensions: Optional[Dict[str, str]] = None
    ) -> bool:
        """
        Publish the counters of one read in a single request.

        Args:
            summary: Counters of the completed read
            dimensions: Dimensions applied to every metric (e.g. Queue)

        Returns:
            True if CloudWatch accepted the data
        """
        data = [
            _datum(metric_name, getattr(summary, field), dimensions=dimensions)
            for metric_name, field in SUMMARY_METRICS
        ]
        return self._put(data)

    def put_metric(
        self,
        metric_name: str,
        value: float,
        unit: str = 'Count',
        dimensions: Optional[Dict[str, str]] = None
    ) -> bool:
        """Publish one metric; returns True if CloudWatch accepted it."""
        return self._put([_datum(metric_name, value, unit, dimensions)])

    def _put(self, data: List[Dict[str, Any]]) -> bool:
        names = [datum['MetricName'] for datum in data]
        try:
            self.cloudwatch.put_metric_data(Namespace=self.namespace, MetricData=data)
        except (ClientError, BotoCoreError) as e:
            # Messages have already been moved; the run still succeeds
            logger.warning(
                "Metrics not published",
                namespace=self.namespace,
                metrics=names,
                error=str(e),
                error_type=type(e).__name__
            )
            return False

        logger.debug("Metrics published", namespace=self.namespace, metrics=names)
        return True
