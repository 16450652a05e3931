from dataclasses import dataclass
from typing import List

import pandas as pd

from .interfaces import Indicator, check_monotonic_definedness, validate_ohlcv


@dataclass(frozen=True)
class FeaturePipeline:
    indicators: List[Indicator]
    strict: bool = False

    def transform(self, ohlcv: pd.DataFrame) -> pd.DataFrame:
        """
        Computes every indicator over the same OHLCV frame.

        Args:
            ohlcv: Input DataFrame with OHLCV data.

        Returns:
            DataFrame with one column per indicator output, in declaration order.
            With ``strict`` set, each column is checked for monotonic definedness.
        """
        validate_ohlcv(ohlcv)

        features = []
        for indicator in self.indicators:
            df_feature = indicator.compute(ohlcv)
            if self.strict:
                for col in df_feature.columns:
                    check_monotonic_definedness(df_feature[col].to_numpy(), col)
            features.append(df_feature)

        if not features:
            return pd.DataFrame(index=ohlcv.index)

        return pd.concat(features, axis=1)

    @property
    def max_lookback(self) -> int:
        return max((ind.lookback for ind in self.indicators), default=0)
