import asyncio
from types import SimpleNamespace

import pytest

import app.core.dependencies as dependencies
from app.core.errors import ApiError, ErrorKind


class CountingOracle:
    built = 0

    @classmethod
    def from_settings(cls, settings):
        cls.built += 1
        return cls()


@pytest.fixture
def fake_request():
    return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))


class TestGetWhitelistOracle:
    def test_concurrent_first_requests_share_one_oracle(self, monkeypatch, fake_request, settings):
        CountingOracle.built = 0
        monkeypatch.setattr(dependencies, "WhitelistOracle", CountingOracle)

        async def first_requests():
            return await asyncio.gather(
                *(dependencies.get_whitelist_oracle(fake_request, settings) for _ in range(5))
            )

        oracles = asyncio.run(first_requests())

        assert CountingOracle.built == 1
        assert all(o is oracles[0] for o in oracles)
        assert fake_request.app.state.whitelist_oracle is oracles[0]

    def test_bad_contract_address_fails_the_request(self, fake_request, settings):
        broken = settings.model_copy(update={"WHITELIST_ADDRESS": "not-an-address"})

        with pytest.raises(ApiError) as exc_info:
            asyncio.run(dependencies.get_whitelist_oracle(fake_request, broken))
        assert exc_info.value.kind is ErrorKind.CONTRACT_INIT_FAILED


class TestExtractToken:
    @pytest.mark.parametrize("header", [None, "", "Bearer", "Basic abc", "abc", "Bearer a b"])
    def test_rejected_headers(self, header):
        with pytest.raises(ApiError) as exc_info:
            dependencies._extract_token(header)
        assert exc_info.value.kind is ErrorKind.UNAUTHORIZED

    def test_bearer_token(self):
        assert dependencies._extract_token("Bearer abc.def.ghi") == "abc.def.ghi"
        assert dependencies._extract_token("bearer abc") == "abc"
