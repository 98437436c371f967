EXTRACTION_PROMPT = """\
Analyze this receipt image and extract all relevant information into a structured JSON format suitable for expense reporting.

Please return a JSON object with the following structure:
{
  "receipt_info": {
    "merchant_name": "string",
    "address": "string",
    "date": "YYYY-MM-DD",
    "time": "HH:MM",
    "server": "string",
    "guest_count": number
  },
  "items": [
    {
      "name": "string",
      "quantity": number,
      "unit_price": number,
      "total_price": number,
      "currency": "string"
    }
  ],
  "totals": {
    "subtotal": number,
    "tax": number,
    "total": number,
    "payment_method": "string",
    "payment_amount": number,
    "change": number,
    "currency": "string"
  },
  "expense_category": "string",
  "business_purpose": "string"
}

Rules:
- currency: the 3-letter ISO code (e.g. VND for Vietnamese Dong, USD for US Dollar)
- expense_category: suggest an appropriate category like "Meals & Entertainment", "Business Meals", "Travel", "Office Supplies"
- business_purpose: suggest a generic purpose like "Business meal" or "Client entertainment"
- Extract all numerical values as numbers, not strings
- Dates must be in YYYY-MM-DD format
- Return only the JSON object"""
