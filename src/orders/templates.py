"""HTML bodies for the order confirmation and admin notification emails."""

from __future__ import annotations

import html
from datetime import datetime, timezone

from src.integrations.contracts.interfaces import OrderReceipt

STORE_TITLE = "44 Bulldogs FC Official Merch"
TEAM_SIGNATURE = "The 44 Bulldogs FC & Ujana na Ujuzi Team"
PAYBILL_NUMBER = "600100"
PAYBILL_ACCOUNT = "440047"
PAYBILL_ACCOUNT_NAME = "Ujana na Ujuzi"
WEBSITE_URL = "https://ujananaujuzi.org"

_STYLE = """
  body { font-family: 'Arial', sans-serif; background-color: #f8f9fb; color: #333; margin: 0; padding: 0; }
  .container { max-width: 600px; margin: 20px auto; background: #ffffff; border-radius: 12px; overflow: hidden; }
  .header { background: linear-gradient(90deg, #001f3f, #e50914); color: #fff; text-align: center; padding: 20px; }
  .content { padding: 20px; line-height: 1.6; }
  .order-summary { background-color: #f1f3f6; border-radius: 10px; padding: 15px; margin: 15px 0; }
  .payment { background-color: #fff3cd; border: 1px solid #ffeeba; border-radius: 10px; padding: 15px; }
  .footer { text-align: center; padding: 15px; background-color: #111; color: #bbb; font-size: 13px; }
"""


def _e(value) -> str:
    return html.escape("N/A" if value in (None, "") else str(value))


def _currency_label(currency: str) -> str:
    return "Ksh" if currency.upper() == "KES" else _e(currency)


def _summary_rows(receipt: OrderReceipt) -> str:
    order = receipt.order
    return (
        f"<p><strong>Item:</strong> {_e(order.item)}</p>\n"
        f"<p><strong>Quantity:</strong> {order.quantity}</p>\n"
        f"<p><strong>Size:</strong> {_e(order.size)}</p>\n"
        f"<p><strong>Color:</strong> {_e(order.color)}</p>\n"
        f"<p><strong>Total:</strong> {_currency_label(receipt.currency)} {receipt.total}</p>\n"
        f"<p><strong>Phone:</strong> {_e(order.phone)}</p>"
    )


def customer_confirmation_subject() -> str:
    return "Your 44 Bulldogs Order Confirmation"


def customer_confirmation_html(receipt: OrderReceipt) -> str:
    year = datetime.now(timezone.utc).year
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>Order Confirmation</title>
  <style>{_STYLE}</style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>{STORE_TITLE}</h1></div>
    <div class="content">
      <h2>Hey {_e(receipt.order.name)},</h2>
      <p>Thank you for supporting <strong>44 Bulldogs FC</strong> through your merch order!</p>
      <p>Your order details are as follows:</p>
      <div class="order-summary">
{_summary_rows(receipt)}
      </div>
      <div class="payment">
        <p><strong>Next Step:</strong> To confirm your order, please make payment to:</p>
        <p>
          <strong>Paybill:</strong> {PAYBILL_NUMBER}<br/>
          <strong>Account Number:</strong> {PAYBILL_ACCOUNT}<br/>
          <strong>Account Name:</strong> {PAYBILL_ACCOUNT_NAME}
        </p>
        <p>Once payment is made, your order will be processed and you'll be notified when it's ready for delivery or collection.</p>
      </div>
      <p style="margin-top: 20px;"><strong>– {TEAM_SIGNATURE}</strong></p>
    </div>
    <div class="footer">
      <p>© {year} {PAYBILL_ACCOUNT_NAME} | All Rights Reserved</p>
      <p><a href="{WEBSITE_URL}" target="_blank">Visit Our Website</a></p>
    </div>
  </div>
</body>
</html>
"""


def admin_notification_subject(receipt: OrderReceipt) -> str:
    return f"New 44 Bulldogs Order from {receipt.order.name}"


def admin_notification_html(receipt: OrderReceipt) -> str:
    order = receipt.order
    return (
        "<h2>New Order Received</h2>\n"
        f"<p><strong>Customer Name:</strong> {_e(order.name)}</p>\n"
        f"<p><strong>Email:</strong> {_e(order.email)}</p>\n"
        f"{_summary_rows(receipt)}\n"
        f"<p><strong>Payment:</strong> Expected via Paybill {PAYBILL_NUMBER} "
        f"(Account {PAYBILL_ACCOUNT} – {PAYBILL_ACCOUNT_NAME})</p>"
    )
