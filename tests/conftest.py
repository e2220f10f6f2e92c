from typing import Optional
from unittest.mock import Mock

import pytest

from wechat_pay import Params, PayClient, PayConfig, encode, sign

API_KEY = "192006250b4c09247ec02edce69f6a2d"


def mock_response(body: bytes, status_code: int = 200) -> Mock:
    resp = Mock()
    resp.status_code = status_code
    resp.content = body
    resp.text = body.decode("utf-8", errors="replace")
    return resp


def signed_reply(fields: dict, api_key: str = API_KEY, sign_type: Optional[str] = None) -> bytes:
    reply = Params(fields)
    reply.add("sign", sign(reply, api_key, sign_type))
    return encode(reply)


@pytest.fixture
def config() -> PayConfig:
    return PayConfig(
        app_id="wx1",
        mch_id="m1",
        api_key=API_KEY,
        notify_url="https://merchant.example/notify",
    )


@pytest.fixture
def session() -> Mock:
    return Mock()


@pytest.fixture
def client(config: PayConfig, session: Mock) -> PayClient:
    return PayClient(config, session=session)
