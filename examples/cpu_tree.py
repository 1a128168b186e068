import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from sklearn.tree import DecisionTreeRegressor

from pyDendro import dendro_data
from pyDendro.plotting import plot_dendro

rng = np.random.default_rng(0)
X = pd.DataFrame(rng.uniform(0, 1, size=(500, 3)), columns=["syct", "mmax", "cach"])
y = 2 * (X["mmax"] > 0.5) + X["cach"] + rng.normal(0, 0.1, size=500)

m = DecisionTreeRegressor(max_depth=3, random_state=0).fit(X, y)
data = dendro_data(m)
print(data.segments.head())
print(data.leaf_labels)

plot_dendro(data)
plt.show()
