import pytest

from wechat_pay import Params, validate
from wechat_pay.core.errors import (
    ConflictingParametersError,
    MissingOneOfError,
    MissingParameterError,
    UnexpectedParameterError,
)
from wechat_pay.core.schemas import REFUND_QUERY_REQUEST, UNIFIED_ORDER_REQUEST
from wechat_pay.core.validation import ParamRules


def _refund_query(**extra) -> Params:
    p = Params({"appid": "wx1", "mch_id": "m1", "nonce_str": "n", "out_trade_no": "T1"})
    p.update(extra)
    return p


def test_refund_query_with_single_one_of_passes():
    validate(_refund_query(), REFUND_QUERY_REQUEST.rules)
    validate(_refund_query(sign_type="MD5", offset=10), REFUND_QUERY_REQUEST.rules)


def test_two_one_of_keys_conflict():
    with pytest.raises(ConflictingParametersError) as excinfo:
        validate(_refund_query(refund_id="R1"), REFUND_QUERY_REQUEST.rules)
    assert "more than one" in str(excinfo.value)
    assert set(excinfo.value.present) == {"out_trade_no", "refund_id"}


def test_missing_one_of():
    p = _refund_query()
    p.delete("out_trade_no")
    with pytest.raises(MissingOneOfError):
        validate(p, REFUND_QUERY_REQUEST.rules)


@pytest.mark.parametrize("key", ["appid", "mch_id", "nonce_str"])
def test_missing_required(key):
    p = _refund_query()
    p.delete(key)
    with pytest.raises(MissingParameterError) as excinfo:
        validate(p, REFUND_QUERY_REQUEST.rules)
    assert excinfo.value.name == key


def test_sign_is_not_required_before_signing():
    assert "sign" in REFUND_QUERY_REQUEST.rules.must
    validate(_refund_query(), REFUND_QUERY_REQUEST.rules)


def test_unexpected_key():
    with pytest.raises(UnexpectedParameterError) as excinfo:
        validate(_refund_query(openid="o1"), REFUND_QUERY_REQUEST.rules)
    assert excinfo.value.name == "openid"


def test_one_of_checked_before_required():
    p = Params({"out_trade_no": "T1", "refund_id": "R1"})
    with pytest.raises(ConflictingParametersError):
        validate(p, REFUND_QUERY_REQUEST.rules)


def test_empty_one_of_group_is_skipped():
    rules = ParamRules(must=("a",), optional=("b",))
    validate(Params({"a": "1"}), rules)
    assert UNIFIED_ORDER_REQUEST.rules.one_of == ()


def test_allowed_is_union():
    rules = REFUND_QUERY_REQUEST.rules
    assert rules.allowed == frozenset(
        {
            "appid", "mch_id", "nonce_str", "sign",
            "transaction_id", "out_trade_no", "out_refund_no", "refund_id",
            "sign_type", "offset",
        }
    )
