"""models — The neuron model zoo.

Eight single-neuron variants (four maps, two integrate-and-fire units, two
conductance-based ODE systems), each with a bursting and an excitable
parameter set, behind one capability contract.

References:
    Kuva et al. 2001 — KTz map
    Izhikevich 2003 — simple spiking model
    Rulkov 2002 — map-based neurons
    Hodgkin & Huxley 1952
    Hill et al. 2001 — leech heart interneuron
"""

from .params import (
    Regime,
    ModelKind,
    CONCRETE_KINDS,
    Timing,
    LIFParams,
    GLExpParams,
    KTzParams,
    IzhikevichParams,
    RulkovParams,
    HHStdParams,
    HHLeechParams,
    ParamSet,
    ParamDB,
    PARAM_DB,
    get_param_set,
    list_param_sets,
)
from .integrators import rk4_step
from .neurons import (
    Neuron,
    LIFModel,
    GLExpModel,
    KTzTanhModel,
    KTzLogModel,
    IzhikevichModel,
    RulkovModel,
    HHStdModel,
    HHLeechModel,
    NEURON_CLASSES,
    create_neuron,
)
