"""Electrical synapse between two neurons."""


class GapJunction:
    """Directed gap junction pre -> post.

    The junction only references its endpoints. Its current,
        I = conductance * (V_pre - V_post),
    is cached by time_step() and read by the postsynaptic neuron during its
    networked step.

    Parameters
    ----------
    pre : Neuron
        Presynaptic neuron.
    post : Neuron
        Postsynaptic neuron.
    conductance : float
        Coupling strength.
    """

    def __init__(self, pre, post, conductance):
        self.pre = pre
        self.post = post
        self.conductance = float(conductance)
        self.reset()

    def time_step(self):
        self.current = self.conductance * (self.pre.get_potential()
                                           - self.post.get_potential())

    def reset(self):
        self.current = 0.0

    def __repr__(self):
        return (f"GapJunction({self.pre.name} -> {self.post.name}, "
                f"g={self.conductance}, I={self.current})")
