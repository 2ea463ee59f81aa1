"""Guarded writes on lockable entities honour the edit lock."""
import pytest

from quoteportal.articles.models import Article, ArticleCalculation
from quoteportal.blocks.models import Block, BlockContent
from quoteportal.locks.storage import read_lock_state
from quoteportal.locks.targets import ARTICLES, QUOTE_VERSIONS, SALES_OPPORTUNITIES
from quoteportal.quotes.models import Quote, QuoteVersion
from quoteportal.sales_opportunities.models import OpportunityStatus, SalesOpportunity


def _lock(client, auth, user, path):
    res = client.post(f"{path}/lock", headers=auth(user))
    assert res.status_code == 200, res.text


class TestArticles:
    def test_create_and_read(self, client, auth, anna):
        res = client.post(
            "/api/articles", json={"number": "A-77", "price": "10.00"}, headers=auth(anna)
        )
        assert res.status_code == 200
        created = res.json()
        assert created["number"] == "A-77"
        assert created["blocked"] is None

        fetched = client.get(f"/api/articles/{created['id']}").json()
        assert fetched["id"] == created["id"]
        assert fetched["calculations"] == []

    def test_save_unlocked_article(self, client, auth, db, anna, article):
        res = client.put(
            f"/api/articles/{article.id}", json={"hideTitle": True}, headers=auth(anna)
        )
        assert res.json() == {"success": True}
        db.expire_all()
        assert db.get(Article, article.id).hide_title is True

    def test_scenario_b_other_user_is_rejected(self, client, auth, db, anna, ben, article):
        _lock(client, auth, anna, f"/api/articles/{article.id}")
        locked_at = read_lock_state(db, ARTICLES, article.id).blocked

        res = client.put(
            f"/api/articles/{article.id}", json={"number": "HIJACK"}, headers=auth(ben)
        )

        assert res.status_code == 409
        body = res.json()
        assert body["type"] == "EDIT_LOCK_ERROR"
        assert body["resourceId"] == article.id
        assert body["lockedBy"] == anna.id
        assert body["lockedAt"] == locked_at.isoformat()
        assert body["error"] == ARTICLES.locked_message
        db.expire_all()
        assert db.get(Article, article.id).number == "A-1000"

    def test_scenario_c_holder_writes_and_keeps_lock(self, client, auth, db, anna, article):
        _lock(client, auth, anna, f"/api/articles/{article.id}")
        before = read_lock_state(db, ARTICLES, article.id)

        res = client.put(
            f"/api/articles/{article.id}", json={"number": "A-1001"}, headers=auth(anna)
        )

        assert res.status_code == 200
        after = read_lock_state(db, ARTICLES, article.id)
        assert after.blocked_by == anna.id
        assert after.blocked == before.blocked
        db.expire_all()
        assert db.get(Article, article.id).number == "A-1001"

    def test_lock_columns_are_not_part_of_the_save_body(self, client, auth, db, anna, ben, article):
        res = client.put(
            f"/api/articles/{article.id}", json={"blockedBy": ben.id}, headers=auth(anna)
        )
        assert res.status_code == 200
        assert not read_lock_state(db, ARTICLES, article.id).is_locked

    def test_save_calculations_replaces_rows(self, client, auth, db, anna, article):
        url = f"/api/articles/{article.id}/calculations"
        client.put(url, json=[{"name": "Assembly", "value": "2.5"}], headers=auth(anna))
        res = client.put(
            url,
            json=[
                {"name": "Setup", "type": "time", "value": "1", "order": 0},
                {"name": "Material", "type": "cost", "value": "40", "order": 1},
            ],
            headers=auth(anna),
        )
        assert res.status_code == 200

        calcs = client.get(f"/api/articles/{article.id}").json()["calculations"]
        assert [c["name"] for c in calcs] == ["Setup", "Material"]

    def test_save_calculations_rejected_for_non_holder(self, client, auth, db, anna, ben, article):
        _lock(client, auth, anna, f"/api/articles/{article.id}")
        res = client.put(
            f"/api/articles/{article.id}/calculations",
            json=[{"name": "Setup"}],
            headers=auth(ben),
        )
        assert res.status_code == 409
        db.expire_all()
        assert db.query(ArticleCalculation).count() == 0

    def test_delete_guarded(self, client, auth, db, anna, ben, article):
        article_id = article.id
        _lock(client, auth, anna, f"/api/articles/{article_id}")
        assert client.delete(f"/api/articles/{article_id}", headers=auth(ben)).status_code == 409

        assert client.delete(f"/api/articles/{article_id}", headers=auth(anna)).status_code == 200
        db.expire_all()
        assert db.get(Article, article_id) is None

    def test_write_to_missing_article_is_404(self, client, auth, anna):
        res = client.put("/api/articles/nope", json={"number": "X"}, headers=auth(anna))
        assert res.status_code == 404
        assert res.json() == {"error": "Article not found"}

    def test_explicit_null_is_rejected(self, client, auth, db, anna, article):
        res = client.put(f"/api/articles/{article.id}", json={"number": None}, headers=auth(anna))
        assert res.status_code == 422
        db.expire_all()
        assert db.get(Article, article.id).number == "A-1000"

    def test_write_requires_auth(self, client, article):
        assert client.put(f"/api/articles/{article.id}", json={}).status_code == 401


class TestBlocks:
    def test_save_content_replaces_languages(self, client, auth, db, anna, block):
        url = f"/api/blocks/{block.id}/content"
        client.put(url, json=[{"language": "de", "title": "Zahlung"}], headers=auth(anna))
        res = client.put(
            url,
            json=[
                {"language": "de", "title": "Zahlungsbedingungen", "content": "30 Tage netto"},
                {"language": "en", "title": "Payment terms", "content": "30 days net"},
            ],
            headers=auth(anna),
        )
        assert res.status_code == 200
        contents = client.get(f"/api/blocks/{block.id}").json()["contents"]
        assert sorted(c["language"] for c in contents) == ["de", "en"]

    def test_duplicate_language_is_rejected(self, client, auth, anna, block):
        res = client.put(
            f"/api/blocks/{block.id}/content",
            json=[{"language": "de", "title": "A"}, {"language": "de", "title": "B"}],
            headers=auth(anna),
        )
        assert res.status_code == 400

    def test_content_rejected_for_non_holder(self, client, auth, db, anna, ben, block):
        _lock(client, auth, anna, f"/api/blocks/{block.id}")
        res = client.put(
            f"/api/blocks/{block.id}/content",
            json=[{"language": "de", "title": "Neu"}],
            headers=auth(ben),
        )
        assert res.status_code == 409
        assert res.json()["lockedBy"] == anna.id
        db.expire_all()
        assert db.query(BlockContent).count() == 0

    def test_properties_and_delete(self, client, auth, db, anna, block):
        res = client.put(
            f"/api/blocks/{block.id}", json={"pageBreakAbove": True}, headers=auth(anna)
        )
        assert res.status_code == 200
        db.expire_all()
        assert db.get(Block, block.id).page_break_above is True

        assert client.delete(f"/api/blocks/{block.id}", headers=auth(anna)).status_code == 200
        assert client.get(f"/api/blocks/{block.id}").status_code == 404


    def test_explicit_null_is_rejected(self, client, auth, db, anna, block):
        res = client.put(f"/api/blocks/{block.id}", json={"name": None}, headers=auth(anna))
        assert res.status_code == 422
        db.expire_all()
        assert db.get(Block, block.id).name == "Payment terms"


class TestQuoteVersions:
    def test_save_stamps_modifier(self, client, auth, db, ben, quote_version):
        res = client.put(
            f"/api/quote-versions/{quote_version.id}",
            json={"totalPrice": "1999.90", "accepted": True},
            headers=auth(ben),
        )
        assert res.status_code == 200
        body = client.get(f"/api/quote-versions/{quote_version.id}").json()
        assert body["accepted"] is True
        assert body["modifiedBy"] == ben.id

    def test_explicit_null_is_rejected(self, client, auth, anna, quote_version):
        res = client.put(
            f"/api/quote-versions/{quote_version.id}", json={"accepted": None}, headers=auth(anna)
        )
        assert res.status_code == 422

    def test_total_price_may_be_cleared(self, client, auth, db, anna, quote_version):
        url = f"/api/quote-versions/{quote_version.id}"
        client.put(url, json={"totalPrice": "10.00"}, headers=auth(anna))
        res = client.put(url, json={"totalPrice": None}, headers=auth(anna))
        assert res.status_code == 200
        assert client.get(url).json()["totalPrice"] is None

    def test_delete_rejected_for_non_holder(self, client, auth, db, anna, ben, quote_version):
        _lock(client, auth, anna, f"/api/quote-versions/{quote_version.id}")
        res = client.delete(f"/api/quote-versions/{quote_version.id}", headers=auth(ben))
        assert res.status_code == 409
        assert res.json()["resourceId"] == quote_version.id
        assert read_lock_state(db, QUOTE_VERSIONS, quote_version.id).blocked_by == anna.id

    def test_holder_deletes(self, client, auth, db, anna, quote_version):
        version_id = quote_version.id
        _lock(client, auth, anna, f"/api/quote-versions/{version_id}")
        res = client.delete(f"/api/quote-versions/{version_id}", headers=auth(anna))
        assert res.status_code == 200
        db.expire_all()
        assert db.get(QuoteVersion, version_id) is None


class TestSalesOpportunities:
    def test_create_sets_creator(self, client, auth, ben):
        res = client.post(
            "/api/sales-opportunities", json={"clientName": "Hafen AG"}, headers=auth(ben)
        )
        assert res.status_code == 200
        assert res.json()["createdBy"] == ben.id
        assert res.json()["status"] == "open"

    def test_save_status(self, client, auth, db, anna, sales_opportunity):
        res = client.put(
            f"/api/sales-opportunities/{sales_opportunity.id}",
            json={"status": "won", "keyword": "Netz"},
            headers=auth(anna),
        )
        assert res.status_code == 200
        db.expire_all()
        row = db.get(SalesOpportunity, sales_opportunity.id)
        assert row.status == OpportunityStatus.won
        assert row.modified_by == anna.id

    def test_save_rejected_for_non_holder(self, client, auth, anna, ben, sales_opportunity):
        _lock(client, auth, ben, f"/api/sales-opportunities/{sales_opportunity.id}")
        res = client.put(
            f"/api/sales-opportunities/{sales_opportunity.id}",
            json={"keyword": "x"},
            headers=auth(anna),
        )
        assert res.status_code == 409
        assert res.json()["error"] == SALES_OPPORTUNITIES.locked_message

    def test_delete_refused_while_quotes_exist(self, client, auth, db, anna, sales_opportunity):
        db.add(Quote(sales_opportunity_id=sales_opportunity.id, title="Offer"))
        db.commit()

        res = client.delete(f"/api/sales-opportunities/{sales_opportunity.id}", headers=auth(anna))
        assert res.status_code == 409
        assert "type" not in res.json()

    def test_delete_refused_while_only_deleted_quotes_exist(
        self, client, auth, db, anna, sales_opportunity
    ):
        db.add(Quote(sales_opportunity_id=sales_opportunity.id, title="Old offer", deleted=True))
        db.commit()

        res = client.delete(f"/api/sales-opportunities/{sales_opportunity.id}", headers=auth(anna))
        assert res.status_code == 409
        assert res.json() == {"error": "Sales opportunity still has quotes and cannot be deleted"}

    def test_delete_checks_lock_before_quotes(self, client, auth, db, anna, ben, sales_opportunity):
        db.add(Quote(sales_opportunity_id=sales_opportunity.id, title="Offer"))
        db.commit()
        _lock(client, auth, ben, f"/api/sales-opportunities/{sales_opportunity.id}")

        res = client.delete(f"/api/sales-opportunities/{sales_opportunity.id}", headers=auth(anna))
        assert res.status_code == 409
        assert res.json()["type"] == "EDIT_LOCK_ERROR"

    def test_delete_without_quotes(self, client, auth, db, anna, sales_opportunity):
        opportunity_id = sales_opportunity.id
        res = client.delete(f"/api/sales-opportunities/{opportunity_id}", headers=auth(anna))
        assert res.status_code == 200
        db.expire_all()
        assert db.get(SalesOpportunity, opportunity_id) is None

    @pytest.mark.parametrize("field", ["clientName", "status"])
    def test_explicit_null_is_rejected(self, client, auth, db, anna, sales_opportunity, field):
        res = client.put(
            f"/api/sales-opportunities/{sales_opportunity.id}",
            json={field: None},
            headers=auth(anna),
        )
        assert res.status_code == 422
        db.expire_all()
        row = db.get(SalesOpportunity, sales_opportunity.id)
        assert row.client_name == "Stadtwerke Nord"
        assert row.status == OpportunityStatus.open
