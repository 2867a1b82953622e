BOAT = {
    "kind": "PARTY_BOAT",
    "base_price": 50000,
    "capacity_min": 4,
    "add_ons": [{"type": "catering", "label": "Catering", "price": 500, "price_type": "PER_PERSON"}],
}

WEEKEND_RULE = {
    "id": "weekend",
    "name": "Weekend surcharge",
    "type": "WEEKEND",
    "adjustment_percent": 10,
    "priority": 1,
}


def test_quote_api_success(client):
    response = client.post(
        "/v1/pricing/quote",
        json={
            "booking": {"starts_at": "2026-06-06T18:00:00", "boat": BOAT},
            "rules": [WEEKEND_RULE],
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["currency"] == "inr"
    assert body["gst_amount"] == 9900
    assert body["total_amount"] == 64900
    assert body["final_amount"] == 64900
    assert body["payment"]["advance"] == 32450
    assert body["payment"]["remainder_due_on"] == "2026-06-05"
    assert body["applied_rules"][0]["rule_id"] == "weekend"
    assert response.headers["X-Request-ID"]


def test_quote_api_accepts_settings_snapshot(client):
    response = client.post(
        "/v1/pricing/quote",
        json={
            "booking": {"starts_at": "2026-06-10T09:00:00", "boat": BOAT},
            "settings": {"gst_percent": 5, "advance_percent": 100},
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total_amount"] == 52500
    assert body["payment"]["remainder"] == 0


def test_quote_api_validation_error(client):
    response = client.post(
        "/v1/pricing/quote",
        json={"booking": {"starts_at": "2026-06-06T18:00:00", "boat": {**BOAT, "base_price": -1}}},
    )
    assert response.status_code == 422
    assert response.headers["content-type"].startswith("application/problem+json")
    body = response.json()
    assert body["title"] == "Validation Error"
    assert body["type"].endswith("validation-error")
    assert body["request_id"]
    assert any(error["field"].endswith("base_price") for error in body["errors"])


def test_quote_api_rejects_unknown_rule_type(client):
    response = client.post(
        "/v1/pricing/quote",
        json={
            "booking": {"starts_at": "2026-06-06T18:00:00", "boat": BOAT},
            "rules": [{**WEEKEND_RULE, "type": "LUNAR"}],
        },
    )
    assert response.status_code == 422


def test_quote_api_malformed_rule_is_problem(client):
    response = client.post(
        "/v1/pricing/quote",
        json={
            "booking": {"starts_at": "2026-06-06T18:00:00", "boat": BOAT},
            "rules": [{**WEEKEND_RULE, "type": "SPECIAL"}],
        },
    )
    assert response.status_code == 422
    body = response.json()
    assert body["type"].endswith("invalid-rule-condition")
    assert body["errors"][0]["rule_id"] == "weekend"


def test_quote_api_unknown_add_on(client):
    response = client.post(
        "/v1/pricing/quote",
        json={
            "booking": {
                "starts_at": "2026-06-06T18:00:00",
                "boat": BOAT,
                "selected_add_ons": [{"type": "fireworks"}],
            },
        },
    )
    assert response.status_code == 400
    assert response.json()["type"].endswith("unknown-addon")


def test_rules_match_api_orders_by_priority(client):
    response = client.post(
        "/v1/pricing/rules/match",
        json={
            "at": "2026-06-06T18:00:00",
            "rules": [
                WEEKEND_RULE,
                {
                    "id": "evening",
                    "name": "Evening peak",
                    "type": "PEAK_HOURS",
                    "adjustment_percent": 5,
                    "priority": 3,
                    "conditions": {"start_time": "17:00", "end_time": "22:00"},
                },
            ],
        },
    )
    assert response.status_code == 200
    assert [rule["rule_id"] for rule in response.json()["matched"]] == ["evening", "weekend"]


def test_rules_validate_api_lists_issues(client):
    response = client.post(
        "/v1/pricing/rules/validate",
        json={"rules": [WEEKEND_RULE, {**WEEKEND_RULE, "id": "bad", "type": "SEASONAL"}]},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is False
    assert [issue["rule_id"] for issue in body["issues"]] == ["bad"]


def test_coupon_evaluate_api(client):
    coupon = {
        "code": "flat500",
        "discount_type": "FIXED",
        "discount_value": 500,
        "valid_from": "2026-01-01T00:00:00Z",
        "valid_to": "2026-12-31T23:59:59Z",
    }
    response = client.post(
        "/v1/pricing/coupons/evaluate",
        json={"coupon": coupon, "order_amount": 10000, "boat_kind": "SPEED_BOAT", "at": "2026-06-06T18:00:00Z"},
    )
    assert response.status_code == 200
    assert response.json() == {"code": "FLAT500", "order_amount": 10000, "discount_amount": 500, "final_amount": 9500}


def test_coupon_evaluate_api_expired(client):
    coupon = {
        "code": "old",
        "discount_type": "FIXED",
        "discount_value": 500,
        "valid_from": "2025-01-01T00:00:00Z",
        "valid_to": "2025-12-31T23:59:59Z",
    }
    response = client.post(
        "/v1/pricing/coupons/evaluate",
        json={"coupon": coupon, "order_amount": 10000, "boat_kind": "SPEED_BOAT", "at": "2026-06-06T18:00:00Z"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["title"] == "Invalid Coupon"
    assert body["detail"] == "This coupon has expired"


def test_settings_api_returns_defaults(client):
    response = client.get("/v1/pricing/settings")
    assert response.status_code == 200
    body = response.json()
    assert body["weekend_days"] == [0, 6]
    assert body["full_refund_hours"] == 24


def test_refund_quote_api(client):
    response = client.post(
        "/v1/bookings/refund-quote",
        json={
            "booking": {
                "booking_id": "bk-9",
                "status": "CONFIRMED",
                "starts_at": "2026-06-10T10:00:00Z",
                "final_amount": 60000,
            },
            "cancelled_at": "2026-06-09T20:00:00Z",
            "reason": "Change of plans",
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["tier"] == "partial"
    assert body["refund_amount"] == 30000
    assert body["cancelled_by"] == "CUSTOMER"


def test_refund_quote_api_completed_booking_conflict(client):
    response = client.post(
        "/v1/bookings/refund-quote",
        json={
            "booking": {"status": "COMPLETED", "starts_at": "2026-06-10T10:00:00Z", "final_amount": 60000},
            "cancelled_at": "2026-06-01T10:00:00Z",
        },
    )
    assert response.status_code == 409
    assert response.json()["type"].endswith("non-cancellable-state")


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "charterdesk-pricing"}


def test_quote_api_time_window_with_offset_is_problem(client):
    response = client.post(
        "/v1/pricing/quote",
        json={
            "booking": {"starts_at": "2026-06-06T18:00:00", "boat": BOAT},
            "rules": [
                {
                    "id": "peak",
                    "name": "Peak",
                    "type": "PEAK_HOURS",
                    "adjustment_percent": 10,
                    "conditions": {"start_time": "14:00:00+05:30", "end_time": "18:00:00+05:30"},
                }
            ],
        },
    )
    assert response.status_code == 422
    assert response.json()["type"].endswith("invalid-rule-condition")


def test_quote_api_empty_weekend_days_use_default(client):
    response = client.post(
        "/v1/pricing/quote",
        json={
            "booking": {"starts_at": "2026-06-06T18:00:00", "boat": BOAT},
            "rules": [WEEKEND_RULE],
            "settings": {"weekend_days": []},
        },
    )
    assert response.status_code == 200
    assert response.json()["total_amount"] == 64900


def test_rules_match_api_empty_weekend_days_use_default(client):
    response = client.post(
        "/v1/pricing/rules/match",
        json={"at": "2026-06-06T18:00:00", "rules": [WEEKEND_RULE], "weekend_days": []},
    )
    assert response.status_code == 200
    assert [rule["rule_id"] for rule in response.json()["matched"]] == ["weekend"]


def test_rules_match_api_rejects_out_of_range_weekend_days(client):
    response = client.post(
        "/v1/pricing/rules/match",
        json={"at": "2026-06-06T18:00:00", "rules": [WEEKEND_RULE], "weekend_days": [7]},
    )
    assert response.status_code == 422
    assert any(error["field"] == "weekend_days" for error in response.json()["errors"])


def test_refund_quote_api_admin_override(client):
    booking = {"status": "CONFIRMED", "starts_at": "2026-06-10T10:00:00Z", "final_amount": 60000}
    response = client.post(
        "/v1/bookings/refund-quote",
        json={
            "booking": booking,
            "cancelled_at": "2026-06-01T10:00:00Z",
            "cancelled_by": "ADMIN",
            "refund_percent_override": 25,
        },
    )
    assert response.status_code == 200
    assert response.json()["tier"] == "admin"
    assert response.json()["refund_amount"] == 15000

    response = client.post(
        "/v1/bookings/refund-quote",
        json={
            "booking": booking,
            "cancelled_at": "2026-06-01T10:00:00Z",
            "cancelled_by": "ADMIN",
            "refund_percent_override": 101,
        },
    )
    assert response.status_code == 422
