from store_effects.components.component import EffectComponent, T_EffectComponent

__all__ = ["EffectComponent", "T_EffectComponent"]
