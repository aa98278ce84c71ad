"""
Unit tests for invitation code lookup.
"""
import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

from weddinghub.services import invite_service
from weddinghub.services.invite_service import INVITE_NOT_FOUND, InviteResolver, normalize_code


@pytest.mark.unit
class TestNormalizeCode:
    
    def test_trims_and_lowercases(self):
        assert normalize_code("  AbC123 ") == "abc123"
    
    def test_blank_and_missing(self):
        assert normalize_code("   ") == ""
        assert normalize_code(None) == ""


@pytest.mark.unit
@pytest.mark.asyncio
class TestInviteResolver:
    
    @pytest.mark.parametrize("typed", ["abc123", " abc123 ", "ABC123", "\tAbC123\n"])
    async def test_variants_resolve_to_the_same_guest(self, db_session, test_guest, typed):
        guest = await InviteResolver(db_session).resolve(typed)
        
        assert guest.id == test_guest.id
    
    async def test_blank_code_makes_no_lookup(self, db_session, monkeypatch):
        async def fail(*args, **kwargs):
            raise AssertionError("lookup should not run")
        
        monkeypatch.setattr(invite_service, "db_get_guest_by_invite_code", fail)
        
        assert await InviteResolver(db_session).resolve("   ") is None
    
    async def test_unknown_code_is_not_found(self, db_session, test_guest):
        with pytest.raises(HTTPException) as exc:
            await InviteResolver(db_session).resolve("nope99")
        
        assert exc.value.status_code == 404
        assert exc.value.detail == INVITE_NOT_FOUND
    
    async def test_store_failure_looks_like_not_found(self, db_session, monkeypatch):
        async def broken(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection refused"))
        
        monkeypatch.setattr(invite_service, "db_get_guest_by_invite_code", broken)
        
        with pytest.raises(HTTPException) as exc:
            await InviteResolver(db_session).resolve("abc123")
        
        assert exc.value.status_code == 404
        assert exc.value.detail == INVITE_NOT_FOUND
