"""Tests for the retry decorator state machine."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from cloudstore import (
    BucketMetadata,
    ExponentialBackoffPolicy,
    GetBucketMetadataRequest,
    LimitedErrorCountRetryPolicy,
    LimitedTimeRetryPolicy,
    ObjectMetadata,
    GetObjectMetadataRequest,
    PermanentError,
    RawClient,
    RetryClient,
    RetryPolicyExhaustedError,
    Status,
)


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.mark.parametrize("budget", [0, 1, 2, 5])
def test_budget_plus_one_transient_failures_exhaust_the_policy(
    mock_client: RawClient,
    transient_error: Status,
    budget: int,
) -> None:
    mock_client.get_bucket_metadata.return_value = (transient_error, BucketMetadata())
    client = RetryClient(mock_client, LimitedErrorCountRetryPolicy(budget), sleep=RecordingSleep())

    with pytest.raises(RetryPolicyExhaustedError, match="Retry policy exhausted in get_bucket_metadata"):
        client.get_bucket_metadata(GetBucketMetadataRequest("bucket"))

    assert mock_client.get_bucket_metadata.call_count == budget + 1


@pytest.mark.parametrize("budget", [0, 1, 2, 5])
def test_budget_transient_failures_then_success(
    mock_client: RawClient,
    transient_error: Status,
    budget: int,
) -> None:
    expected = BucketMetadata(name="bucket")
    mock_client.get_bucket_metadata.side_effect = [(transient_error, BucketMetadata())] * budget + [
        (Status(), expected)
    ]
    client = RetryClient(mock_client, LimitedErrorCountRetryPolicy(budget), sleep=RecordingSleep())

    status, response = client.get_bucket_metadata(GetBucketMetadataRequest("bucket"))

    assert status.ok
    assert response == expected
    assert mock_client.get_bucket_metadata.call_count == budget + 1


def test_permanent_failure_is_never_retried(mock_client: RawClient, permanent_error: Status) -> None:
    mock_client.get_object_metadata.return_value = (permanent_error, ObjectMetadata())
    sleep = RecordingSleep()
    client = RetryClient(mock_client, LimitedErrorCountRetryPolicy(10), sleep=sleep)

    with pytest.raises(PermanentError, match="Permanent error in get_object_metadata") as excinfo:
        client.get_object_metadata(GetObjectMetadataRequest("bucket", "object"))

    assert excinfo.value.status == permanent_error
    assert mock_client.get_object_metadata.call_count == 1
    assert sleep.delays == []


def test_permanent_failure_after_transient_failures(
    mock_client: RawClient,
    transient_error: Status,
    permanent_error: Status,
) -> None:
    mock_client.get_bucket_metadata.side_effect = [
        (transient_error, BucketMetadata()),
        (permanent_error, BucketMetadata()),
    ]
    client = RetryClient(mock_client, LimitedErrorCountRetryPolicy(10), sleep=RecordingSleep())

    with pytest.raises(PermanentError):
        client.get_bucket_metadata(GetBucketMetadataRequest("bucket"))
    assert mock_client.get_bucket_metadata.call_count == 2


def test_backoff_delay_is_slept_between_attempts(mock_client: RawClient, transient_error: Status) -> None:
    mock_client.get_bucket_metadata.side_effect = [
        (transient_error, BucketMetadata()),
        (transient_error, BucketMetadata()),
        (Status(), BucketMetadata()),
    ]
    sleep = RecordingSleep()
    client = RetryClient(
        mock_client,
        ExponentialBackoffPolicy(1.0, 1.0, scaling=1.0),
        LimitedErrorCountRetryPolicy(3),
        sleep=sleep,
    )

    client.get_bucket_metadata(GetBucketMetadataRequest("bucket"))

    assert len(sleep.delays) == 2
    assert all(0.0 <= delay <= 1.0 for delay in sleep.delays)


def test_inner_client_is_called_once_even_when_time_budget_is_zero(
    mock_client: RawClient,
    transient_error: Status,
) -> None:
    mock_client.get_bucket_metadata.return_value = (transient_error, BucketMetadata())
    client = RetryClient(mock_client, LimitedTimeRetryPolicy(0), sleep=RecordingSleep())

    with pytest.raises(RetryPolicyExhaustedError):
        client.get_bucket_metadata(GetBucketMetadataRequest("bucket"))
    assert mock_client.get_bucket_metadata.call_count == 1


def test_each_call_gets_a_fresh_budget(mock_client: RawClient, transient_error: Status) -> None:
    failure = (transient_error, BucketMetadata())
    mock_client.get_bucket_metadata.side_effect = [failure, failure, failure, failure, failure, (Status(), BucketMetadata())]
    prototype = LimitedErrorCountRetryPolicy(2)
    client = RetryClient(mock_client, prototype, sleep=RecordingSleep())

    with pytest.raises(RetryPolicyExhaustedError):
        client.get_bucket_metadata(GetBucketMetadataRequest("a"))
    status, _ = client.get_bucket_metadata(GetBucketMetadataRequest("b"))

    assert status.ok
    assert mock_client.get_bucket_metadata.call_count == 6
    assert not prototype.is_exhausted()
    assert client.retry_policy is prototype


def test_concurrent_calls_do_not_share_retry_state(mock_client: RawClient, transient_error: Status) -> None:
    lock = threading.Lock()
    calls: dict[str, int] = {"always-fails": 0, "recovers": 0}

    def respond(request: GetBucketMetadataRequest) -> tuple[Status, BucketMetadata]:
        with lock:
            calls[request.bucket_name] += 1
            count = calls[request.bucket_name]
        if request.bucket_name == "recovers" and count > 2:
            return Status(), BucketMetadata(name="recovers")
        return transient_error, BucketMetadata()

    mock_client.get_bucket_metadata.side_effect = respond
    client = RetryClient(mock_client, LimitedErrorCountRetryPolicy(2), sleep=RecordingSleep())

    with ThreadPoolExecutor(max_workers=2) as pool:
        failing = pool.submit(client.get_bucket_metadata, GetBucketMetadataRequest("always-fails"))
        recovering = pool.submit(client.get_bucket_metadata, GetBucketMetadataRequest("recovers"))

        with pytest.raises(RetryPolicyExhaustedError):
            failing.result()
        status, metadata = recovering.result()

    assert status.ok
    assert metadata.name == "recovers"
    assert calls == {"always-fails": 3, "recovers": 3}


def test_policies_are_accepted_in_any_order(mock_client: RawClient) -> None:
    retry = LimitedErrorCountRetryPolicy(1)
    backoff = ExponentialBackoffPolicy(0.0, 0.0)

    client = RetryClient(mock_client, backoff, retry)

    assert client.retry_policy is retry
    assert client.backoff_policy is backoff


def test_default_policies(mock_client: RawClient) -> None:
    client = RetryClient(mock_client)

    assert isinstance(client.retry_policy, LimitedTimeRetryPolicy)
    assert isinstance(client.backoff_policy, ExponentialBackoffPolicy)


def test_unknown_policy_type_is_rejected(mock_client: RawClient) -> None:
    with pytest.raises(TypeError):
        RetryClient(mock_client, "retry-three-times")  # type: ignore[arg-type]


def test_retry_client_is_a_raw_client(mock_client: RawClient) -> None:
    client = RetryClient(mock_client)

    assert isinstance(client, RawClient)
    assert client.client_options is mock_client.client_options


class AdvancingClock:
    """Fake monotonic clock that moves forward only when slept on."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def sleep(self, delay: float) -> None:
        self.now += delay


def test_time_budget_is_exhausted_as_the_clock_advances(mock_client: RawClient, transient_error: Status) -> None:
    mock_client.get_object_metadata.return_value = (transient_error, ObjectMetadata())
    clock = AdvancingClock()
    client = RetryClient(
        mock_client,
        LimitedTimeRetryPolicy(10.0, clock=clock),
        ExponentialBackoffPolicy(4.0, 4.0, scaling=1.0),
        sleep=lambda _: clock.sleep(4.0),
    )

    with pytest.raises(RetryPolicyExhaustedError, match="Retry policy exhausted in get_object_metadata"):
        client.get_object_metadata(GetObjectMetadataRequest("bucket", "object"))

    # Failures observed at t=0, 4 and 8 are retried; the one at t=12 is past the deadline
    assert mock_client.get_object_metadata.call_count == 4
    assert clock.now == 12.0
