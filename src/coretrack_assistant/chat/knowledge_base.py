"""Static help answers used when the AI path is unavailable."""

# Checked in order; the first keyword contained in the message wins.
KNOWLEDGE_BASE: dict[str, str] = {
    "add inventory": (
        "**Adding Inventory Items**\n\n"
        "1. Open **Inventory Center** from the sidebar\n"
        "2. Click **Add Item**\n"
        "3. Fill in name, category, unit of measure, cost and selling price, "
        "current quantity and minimum stock threshold\n\n"
        "Tip: set realistic reorder points and add supplier details for quick reordering."
    ),
    "pos order": (
        "**Processing POS Orders**\n\n"
        "1. Open POS and start a new order\n"
        "2. Add items by search or barcode, adjust quantities, apply discounts\n"
        "3. Pick a payment method (cash, card, GCash, Maya) and enter the amount\n"
        "4. Print or email the receipt\n\n"
        "Inventory levels update automatically after each sale."
    ),
    "analytics": (
        "**Capital Intelligence Dashboard**\n\n"
        "Shows sales velocity, inventory turnover, profit margins, cash flow and "
        "top products. Green means healthy, yellow needs attention, red needs action."
    ),
    "team management": (
        "**Team Management**\n\n"
        "Go to Settings > Team > Add Member, choose a role (Manager, Cashier, Staff) "
        "and adjust permissions. Sales and POS activity can be reviewed per member."
    ),
    "billing": (
        "**Subscription & Billing**\n\n"
        "Plans: Starter, Professional and Enterprise. Payments go through PayPal; "
        "you can upgrade or downgrade anytime. Failed payments have a 7-day grace period."
    ),
    "sync issues": (
        "**Data Sync Troubleshooting**\n\n"
        "1. Refresh the page and check your connection\n"
        "2. Verify user permissions if POS orders are missing\n"
        "3. Analytics refresh every 5 minutes\n\n"
        "To force a sync, use the refresh icon or sign out and back in."
    ),
    "features": (
        "**CoreTrack Features**\n\n"
        "Inventory Center (stock tracking, reorder alerts, suppliers), Point of Sale "
        "(fast checkout, receipts), Capital Intelligence (analytics and forecasting) "
        "and Business Management (team, locations, security)."
    ),
    "getting started": (
        "**Getting Started**\n\n"
        "1. Add your first 5-10 products in Inventory\n"
        "2. Run a test sale in POS and configure payment methods\n"
        "3. Add team members with the right roles\n\n"
        "Then explore Capital Intelligence and supplier setup."
    ),
    "low stock": (
        "**Low Stock Management**\n\n"
        "Filter Inventory Center by Low Stock, prioritise reorders by sales velocity "
        "and contact suppliers. Keep minimum thresholds in line with seasonal demand."
    ),
    "inventory reports": (
        "**Inventory Reports**\n\n"
        "Stock levels, movement (fast/slow sellers), valuation, low stock alerts and "
        "supplier analysis. Open Dashboard > Business Reports > Inventory Analytics."
    ),
    "payment methods": (
        "**Payment Methods**\n\n"
        "Cash, credit/debit cards, GCash, Maya and bank transfer are supported. "
        "Enable or disable them under Settings > Payment Methods."
    ),
    "team roles": (
        "**Team Roles**\n\n"
        "Staff: POS and assigned inventory. Supervisor: scheduling and monitoring. "
        "Manager: financial reports and suppliers. Owner: full administration."
    ),
    "financial reports": (
        "**Financial Reports**\n\n"
        "Daily sales summary, profit and loss, cash flow, expense breakdown and "
        "BIR-ready tax reports are available under Business Reports."
    ),
    "support": (
        "**Support**\n\n"
        "Email support@coretrack.ph or use live chat. Enterprise plans include a "
        "dedicated account manager and priority support."
    ),
}


def find_knowledge_base_match(message: str) -> str | None:
    """Return the first canned answer whose keyword appears in the message."""
    lower_message = message.lower()
    for key, answer in KNOWLEDGE_BASE.items():
        if key in lower_message:
            return answer
    return None
