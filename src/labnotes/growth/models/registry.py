from . import logistic
from . import richards
from . import richards_hierarchical
from . import observe

model_registry = {
    "growth":{
        "logistic":logistic,
        "richards":richards,
        "richards_hierarchical":richards_hierarchical,
    },
    "observe":observe,
}
