"""
Trading Engine Module

Per-symbol decision pipeline used by TradingBot:
- price_history: Bounded per-symbol bid history
- signal_generator: Minimum-data guard around strategy evaluation
- admission: News gate, cooldown and confidence floor
- risk_sizer: Risk-budget position sizing
- order_executor: Order submission, trade persistence and events
"""
