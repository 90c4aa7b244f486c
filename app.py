import logging
import os
from flask import Flask, jsonify, request
from flask_cors import CORS
from catalog.cards import build_card, status_line
from catalog.loader import load_catalog
from catalog.utils import parse_flag
from search import SearchOptions, search_catalog

PRIVATE_CODE = os.environ.get("PRIVATE_CODE", "DE-2026")

app = Flask(__name__)
app.logger.setLevel(logging.INFO)
CORS(app)

# Loaded once; read-only for the life of the process.
CATALOG = load_catalog()


@app.route('/api/status')
def status():
    return jsonify({
        "ok": CATALOG.ok,
        "message": CATALOG.message,
        "catalog_size": len(CATALOG.records),
    })


@app.route('/api/search')
def search():
    query = request.args.get("q", "")
    options = SearchOptions(
        owned_only=parse_flag(request.args.get("owned")),
        dupes_only=parse_flag(request.args.get("dupes")),
        private_mode=parse_flag(request.args.get("private")),
    )

    result = search_catalog(query, CATALOG.records, options)
    app.logger.info("Search %r (%s) returned %d items", query, result["mode"], result["total_count"])

    if CATALOG.ok:
        message = status_line(result["total_count"], query, result["applied_expansion_labels"])
    else:
        message = CATALOG.message

    return jsonify({
        "query": result["query"],
        "mode": result["mode"],
        "typed_terms": result["typed_terms"],
        "count": result["total_count"],
        "total_count": result["total_count"],
        "catalog_size": len(CATALOG.records),
        "applied_expansion_labels": result["applied_expansion_labels"],
        "matched_notes_by_record_id": result["matched_notes_by_record_id"],
        "status": message,
        "results": [
            build_card(record, result["typed_terms"], options.private_mode)
            for record in result["matches"]
        ],
    })


@app.route('/api/private', methods=['POST'])
def private_mode():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or "code" not in payload:
        return jsonify({"error": "Missing code"}), 400

    if str(payload["code"]) != PRIVATE_CODE:
        app.logger.info("Rejected private mode code")
        return jsonify({"error": "Incorrect code."}), 403

    return jsonify({"private": True})


if __name__ == '__main__':
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port)
