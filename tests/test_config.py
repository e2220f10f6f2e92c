from unittest.mock import Mock

import pytest
import requests

from wechat_pay import (
    ConfigError,
    PayClient,
    PayConfig,
    PayParameters,
    build_environment,
    create_pay_client,
    handle_refund_notify,
    load_env_file,
    load_pay_config,
    query_refund,
)
from wechat_pay.core.crypto import encrypt_req_info

from .conftest import mock_response, signed_reply

BASE = {
    "WECHAT_PAY_APP_ID": "wx1",
    "WECHAT_PAY_MCH_ID": "m1",
    "WECHAT_PAY_API_KEY": "secret",
}


def test_from_mapping_defaults():
    cfg = PayConfig.from_mapping(BASE)
    assert cfg.base_url == "https://api.mch.weixin.qq.com"
    assert cfg.sign_type == "MD5"
    assert cfg.timeout_seconds == 30.0
    assert cfg.notify_url is None
    assert cfg.url("/pay/refundquery") == "https://api.mch.weixin.qq.com/pay/refundquery"


def test_api_key_not_in_repr():
    assert "secret" not in repr(PayConfig.from_mapping(BASE))


@pytest.mark.parametrize("missing", sorted(BASE))
def test_missing_identity_field(missing):
    values = dict(BASE)
    del values[missing]
    with pytest.raises(ConfigError):
        PayConfig.from_mapping(values)


@pytest.mark.parametrize(
    "extra",
    [
        {"WECHAT_PAY_SIGN_TYPE": "SHA1"},
        {"WECHAT_PAY_TIMEOUT_SECONDS": "soon"},
        {"WECHAT_PAY_TIMEOUT_SECONDS": "0"},
    ],
)
def test_invalid_values(extra):
    with pytest.raises(ConfigError):
        PayConfig.from_mapping({**BASE, **extra})


def test_env_file_and_overrides(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# merchant\n"
        "WECHAT_PAY_APP_ID=wx-file\n"
        "export WECHAT_PAY_MCH_ID='m-file'\n"
        "WECHAT_PAY_API_KEY=file-key\n"
        "WECHAT_PAY_BASE_URL=https://sandbox.example/\n",
        encoding="utf-8",
    )
    cfg = load_pay_config(
        env_file=str(env_file),
        base={"WECHAT_PAY_APP_ID": "wx-base"},
        parameters=PayParameters(sign_type="HMAC-SHA256"),
        timeout_seconds=5,
    )
    assert cfg.app_id == "wx-base"
    assert cfg.mch_id == "m-file"
    assert cfg.api_key == "file-key"
    assert cfg.base_url == "https://sandbox.example"
    assert cfg.sign_type == "HMAC-SHA256"
    assert cfg.timeout_seconds == 5.0


def test_build_environment_skips_missing_file(tmp_path):
    env = build_environment(env_file=str(tmp_path / "absent"), base={}, overrides={"A": "1"})
    assert env.get("A") == "1"
    assert env.get("B", "default") == "default"


def test_load_env_file_keeps_existing(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("A=file\nB=file\n", encoding="utf-8")
    target = {"A": "existing"}
    merged = load_env_file(str(env_file), environ=target)
    assert merged == {"A": "existing", "B": "file"}


def test_create_pay_client_rejects_mixed_arguments():
    cfg = PayConfig.from_mapping(BASE)
    assert isinstance(create_pay_client(config=cfg), PayClient)
    with pytest.raises(ValueError):
        create_pay_client(config=cfg, app_id="wx2")


def test_create_pay_client_from_keywords():
    client = create_pay_client(env_file=None, base={}, app_id="wx9", mch_id="m9", api_key="k9")
    assert client.config.app_id == "wx9"


def test_handle_refund_notify_helper():
    cfg = PayConfig.from_mapping(BASE)
    req_info = encrypt_req_info("<root><refund_status>CHANGE</refund_status></root>", "secret")
    body = (
        "<xml><return_code>SUCCESS</return_code>"
        f"<req_info>{req_info}</req_info></xml>"
    )
    notification = handle_refund_notify(body, config=cfg)
    assert notification.refund_status == "CHANGE"


def test_query_refund_helper():
    cfg = PayConfig.from_mapping(BASE)
    session = Mock()
    session.post.return_value = mock_response(
        signed_reply(
            {"return_code": "SUCCESS", "result_code": "SUCCESS", "refund_count": 0},
            api_key="secret",
        )
    )
    result = query_refund({"refund_id": "R1"}, config=cfg, session=session)
    assert result.get("refund_count") == 0


def test_handle_refund_notify_helper_closes_its_session(monkeypatch):
    created = Mock()
    monkeypatch.setattr(requests, "Session", lambda: created)
    cfg = PayConfig.from_mapping(BASE)
    req_info = encrypt_req_info("<root><refund_status>SUCCESS</refund_status></root>", "secret")
    body = f"<xml><return_code>SUCCESS</return_code><req_info>{req_info}</req_info></xml>"

    assert handle_refund_notify(body, config=cfg).refund_status == "SUCCESS"
    created.post.assert_not_called()
    created.close.assert_called_once_with()


def test_env_file_parsing_details(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "WECHAT_PAY_APP_ID=wx-file # merchant app\n"
        'WECHAT_PAY_MCH_ID="m # 1"\n'
        "=orphan\n",
        encoding="utf-8",
    )
    env = build_environment(env_file=str(env_file), base={})
    assert env == {"WECHAT_PAY_APP_ID": "wx-file", "WECHAT_PAY_MCH_ID": "m # 1"}
