"""
Storefront search endpoints
"""


def _seed(client, supplier, make_xlsx, row):
    content = make_xlsx([
        row("Hex Bolt M8", "HB-008", group="Hardware", brand="Acme"),
        row("Hex Nut M8", "HN-008", group="Hardware", brand="Zenith"),
        row("Gloss White", "PT-100", group="Paint", brand="Jotun"),
    ])
    resp = client.post(
        f"/api/admin/products/bulk-upload/{supplier.id}",
        files={"excelFile": ("p.xlsx", content, "application/octet-stream")},
    )
    assert resp.json()["successCount"] == 3


def _codes(resp):
    return sorted(item["itemCode"] for item in resp.json()["data"])


def test_global_search_item_shape(client, supplier, make_xlsx, row):
    _seed(client, supplier, make_xlsx, row)

    body = client.get("/api/search", params={"q": "gloss"}).json()

    assert body["pagination"]["totalElements"] == 1
    assert body["data"] == [{
        "productId": body["data"][0]["productId"],
        "supplierId": str(supplier.id),
        "productName": "Gloss White",
        "itemCode": "PT-100",
        "categoryName": "Paint",
        "subCategoryName": "Jotun",
        "supplierName": "Gulf Bolts Trading",
        "supplierContactNumber": "974 55123456",
        "supplierEmailId": "sales@gulfbolts.example",
    }]


def test_global_search_matches_names_and_codes(client, supplier, make_xlsx, row):
    _seed(client, supplier, make_xlsx, row)

    assert _codes(client.get("/api/search", params={"q": "hardware"})) == ["HB-008", "HN-008"]
    assert _codes(client.get("/api/search", params={"q": "zenith"})) == ["HN-008"]
    assert _codes(client.get("/api/search", params={"q": "pt-1"})) == ["PT-100"]
    assert len(client.get("/api/search").json()["data"]) == 3


def test_field_specific_searches(client, supplier, make_xlsx, row):
    _seed(client, supplier, make_xlsx, row)

    assert _codes(client.get("/api/products/search", params={"q": "hex"})) == ["HB-008", "HN-008"]
    assert _codes(client.get("/api/itemcode/search", params={"q": "h"})) == ["HB-008", "HN-008"]
    # Item code search is a prefix match
    assert _codes(client.get("/api/itemcode/search", params={"q": "008"})) == []
    assert _codes(client.get("/api/category/search", params={"q": "pai"})) == ["PT-100"]
    sub = client.get("/api/subcategory/search", params={"q": "acme"}).json()
    assert [i["itemCode"] for i in sub["data"]] == ["HB-008"]
    assert sub["pagination"]["size"] == 500


def test_supplier_search(client, supplier, make_xlsx, row):
    _seed(client, supplier, make_xlsx, row)

    found = client.get("/api/supplier/search", params={"q": "gulf"})
    missing = client.get("/api/supplier/search", params={"q": "unknown"})

    assert _codes(found) == ["HB-008", "HN-008", "PT-100"]
    assert missing.status_code == 404
