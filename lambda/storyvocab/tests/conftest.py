# lambda/storyvocab/tests/conftest.py
import os
from dataclasses import dataclass

import pytest

# must be set before storyvocab.store builds its boto3 resource/client
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("DDB_TABLE", "storyvocab-test")


@dataclass
class FakeLambdaContext:
    function_name: str = "storyvocab-test"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = "arn:aws:lambda:us-east-1:123456789012:function:storyvocab-test"
    aws_request_id: str = "req-123"


@pytest.fixture
def lambda_context():
    return FakeLambdaContext()


@pytest.fixture
def words():
    def make(n, prefix="w"):
        return [f"{prefix}{i:03d}" for i in range(n)]
    return make
