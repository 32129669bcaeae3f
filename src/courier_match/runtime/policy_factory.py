from courier_match.app.protocols import EligibilityPolicy, PricingPolicy, ScoringPolicy
from courier_match.config.models import EligibilityModel, PricingModel, ScoringModel
from courier_match.policy.eligibility import RuleBasedEligibility
from courier_match.policy.pricing import TariffPricingPolicy
from courier_match.policy.scoring import WeightedConfidence


def make_eligibility_policy(cfg: EligibilityModel) -> EligibilityPolicy:
    if isinstance(cfg, EligibilityModel):
        return RuleBasedEligibility(cfg)
    else:
        raise TypeError(cfg)


def make_scoring_policy(cfg: ScoringModel) -> ScoringPolicy:
    if isinstance(cfg, ScoringModel):
        return WeightedConfidence(cfg)
    else:
        raise TypeError(cfg)


def make_pricing_policy(cfg: PricingModel) -> PricingPolicy:
    if isinstance(cfg, PricingModel):
        return TariffPricingPolicy(cfg)
    else:
        raise TypeError(cfg)
