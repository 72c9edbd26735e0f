from __future__ import annotations

from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings

from entry_risk.sizing.models import RiskSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # === Risk settings (初期値) ===
    account_balance: float = 100_000.0  # 口座残高
    risk_percentage: float = 2.0  # 1 トレードあたりの許容リスク %
    pips_value_per_lot: float = 1000.0  # USD/JPY 1 万通貨なら 1000 円/pip
    min_lot: float = 0.01
    lot_step: float = 0.01
    min_risk_reward_ratio: float = 1.5

    # === Trade input ===
    default_currency_pair: str = "USD/JPY"

    # === Analytics ===
    analysis_timezone: str = "Asia/Tokyo"  # 曜日・時間帯集計のタイムゾーン
    history_path: Path = Path("data/history.json")  # JSON エクスポートの既定パス

    def risk_settings(self) -> RiskSettings:
        return RiskSettings(
            account_balance=self.account_balance,
            risk_percentage=self.risk_percentage,
            pips_value_per_lot=self.pips_value_per_lot,
            min_lot=self.min_lot,
            lot_step=self.lot_step,
            min_risk_reward_ratio=self.min_risk_reward_ratio,
        )

    def analysis_tz(self) -> ZoneInfo:
        return ZoneInfo(self.analysis_timezone)


settings = Settings()
